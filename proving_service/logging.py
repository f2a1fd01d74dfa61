from __future__ import annotations

"""
structlog + stdlib logging for the proving service.

Both structlog loggers (HTTP layer) and plain ``logging.getLogger`` loggers
(transpiler, services, uvicorn) end up in one handler on the root logger and
share a processor chain:

    level → timestamp → contextvars (request_id, method, path)
    → exc info → secret redaction → payload clipping → service name

Assembly listings and generated contracts run to thousands of lines; any
event field carrying one is clipped to a short preview plus its length so a
single failed transpile does not flood the log.

    from proving_service.logging import setup_logging, get_logger

    setup_logging(level="DEBUG", log_format="console")
    get_logger(__name__).info("transpiled", transcript_words=24)
"""

import logging
from typing import Any, Dict, List, Optional

import structlog
from structlog.contextvars import merge_contextvars

REDACT_KEYS = {"authorization", "token", "password", "secret", "api_key"}

# Event fields that may hold a full listing, contract, or proof.
PAYLOAD_KEYS = {"assembly", "contract", "proof", "bytecode"}
PAYLOAD_PREVIEW = 120

# Loggers that get the shared handler instead of their own.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

EventDict = Dict[str, Any]


def _redact_secrets(_: Any, __: str, event_dict: EventDict) -> EventDict:
    for k in list(event_dict.keys()):
        if k.lower() in REDACT_KEYS and event_dict[k] is not None:
            event_dict[k] = "***"
    return event_dict


def _clip_payloads(_: Any, __: str, event_dict: EventDict) -> EventDict:
    for k in PAYLOAD_KEYS.intersection(event_dict):
        v = event_dict[k]
        if isinstance(v, (bytes, bytearray)):
            v = event_dict[k] = v.hex()
        if isinstance(v, str) and len(v) > PAYLOAD_PREVIEW:
            event_dict[k] = f"{v[:PAYLOAD_PREVIEW]}… ({len(v)} chars)"
    return event_dict


def _shared_processors(service_name: str) -> List[Any]:
    def add_service(_: Any, __: str, ev: EventDict) -> EventDict:
        ev.setdefault("service", service_name)
        return ev

    return [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _redact_secrets,
        _clip_payloads,
        add_service,
    ]


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)
    return structlog.processors.JSONRenderer(sort_keys=True)


def setup_logging(
    *,
    service_name: str = "proving-service",
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog and the root logger.

    Called by ``create_app`` and by the CLI. Calling it again replaces the
    root handler rather than adding a second one.
    """
    level = level or "INFO"
    shared = _shared_processors(service_name)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer((log_format or "json").lower()),
            ],
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *shared],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers = [handler]
        lg.propagate = False
        lg.setLevel(level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(**kv: Any) -> None:
    structlog.contextvars.bind_contextvars(**kv)


def clear_request_context(*keys: str) -> None:
    """Drop ``keys`` from the request context, or everything when none are given."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


__all__ = [
    "setup_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
]

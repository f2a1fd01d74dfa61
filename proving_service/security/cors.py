from __future__ import annotations

"""
CORS policy for the browser SDK.

The passkey demo calls ``/prove`` from a web page with credentials, so the
policy is an explicit allowlist:

- exact origins ("http://localhost:3000") are matched as-is; a trailing "/"
  is dropped since browsers never send one;
- wildcard origins ("https://*.example.com") become one anchored regex,
  where ``*`` stands for one or more subdomain labels;
- "*" alone is only accepted with credentials disabled.

    setup_cors(app, settings.to_cors_config())
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

log = logging.getLogger(__name__)

_SUBDOMAINS = r"(?:[^/.:]+\.)*[^/.:]+"


@dataclass(frozen=True)
class CORSConfig:
    allow_origins: List[str]
    allow_origin_regex: Optional[str]
    allow_methods: List[str]
    allow_headers: List[str]
    expose_headers: List[str]
    allow_credentials: bool
    max_age: int


def _check_origin(origin: str) -> str:
    origin = origin.rstrip("/")
    scheme, sep, host = origin.partition("://")
    if not sep or not scheme or not host:
        raise ValueError(f"CORS origin needs a scheme and host: {origin!r}")
    if "/" in host:
        raise ValueError(f"CORS origin must not include a path: {origin!r}")
    return origin


def _wildcard_regex(origin: str) -> str:
    return re.escape(origin).replace(r"\*", _SUBDOMAINS)


def _split_origins(origins: Sequence[str]) -> Tuple[List[str], Optional[str]]:
    exact: List[str] = []
    patterns: List[str] = []
    for raw in origins:
        origin = _check_origin(raw)
        if "*" in origin:
            patterns.append(_wildcard_regex(origin))
        else:
            exact.append(origin)
    regex = "^(?:" + "|".join(patterns) + ")$" if patterns else None
    return exact, regex


def build_cors_config(
    *,
    allow_origins: Sequence[str],
    allow_methods: Sequence[str],
    allow_headers: Sequence[str],
    allow_credentials: bool,
    max_age: int = 600,
    expose_headers: Sequence[str] = ("X-Request-Id",),
) -> CORSConfig:
    """Validate the configured origins and resolve them for CORSMiddleware."""
    origins = list(allow_origins)
    if "*" in origins:
        if allow_credentials:
            raise ValueError(
                'CORS_ALLOW_ORIGINS="*" is incompatible with CORS_ALLOW_CREDENTIALS=true'
            )
        exact, regex = ["*"], None
    else:
        exact, regex = _split_origins(origins)

    return CORSConfig(
        allow_origins=exact,
        allow_origin_regex=regex,
        allow_methods=list(allow_methods),
        allow_headers=list(allow_headers),
        expose_headers=list(expose_headers),
        allow_credentials=allow_credentials,
        max_age=max_age,
    )


def setup_cors(app: FastAPI, config: CORSConfig) -> CORSConfig:
    log.debug(
        "CORS origins=%s regex=%s credentials=%s",
        config.allow_origins,
        config.allow_origin_regex,
        config.allow_credentials,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_origin_regex=config.allow_origin_regex,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allow_methods,
        allow_headers=config.allow_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age,
    )
    return config


__all__ = ["CORSConfig", "build_cors_config", "setup_cors"]

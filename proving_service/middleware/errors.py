from __future__ import annotations

"""
Exception → RFC7807 "problem+json" mappers for FastAPI.

- Produces `application/problem+json` for:
    * ApiError subclasses (from proving_service.errors)
    * TranspileError raised straight out of the transpiler
    * Starlette/FastAPI HTTPException
    * RequestValidationError (400 bad_request when only hex inputs failed)
    * Unhandled exceptions (500)
- Attaches ``request_id`` from request.state when present.
- Never leaks stack traces in responses; logs them instead.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import ApiError, BadRequest, TranspileFailed
from ..models.common import HEX_ERROR_TYPE
from ..transpiler.errors import TranspileError

PROBLEM_CT = "application/problem+json"

log = structlog.get_logger(__name__)

_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def _base_problem(
    request: Request,
    *,
    status: int,
    title: str,
    detail: str = "",
    code: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    prob: Dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": str(request.url.path),
        "request_id": getattr(request.state, "request_id", "") or "",
    }
    if code:
        prob["code"] = code
    for k, v in (extras or {}).items():
        prob.setdefault(k, v)
    return prob


def _respond(status: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status, content=jsonable_encoder(body), media_type=PROBLEM_CT)


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    problem = exc.to_problem()
    body = _base_problem(
        request,
        status=exc.status_code,
        title=problem["title"],
        detail=exc.message,
        code=exc.code,
        extras={"details": problem["details"]} if "details" in problem else None,
    )
    if exc.status_code >= 500:
        log.error("api_error", **body)
    else:
        log.warning("api_error", **body)
    return _respond(exc.status_code, body)


async def _handle_transpile_error(request: Request, exc: TranspileError) -> JSONResponse:
    return await _handle_api_error(request, TranspileFailed(exc))


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status = int(exc.status_code)
    body = _base_problem(
        request,
        status=status,
        title=_TITLES.get(status, "Error"),
        detail=str(exc.detail) if exc.detail else "",
    )
    (log.warning if 400 <= status < 500 else log.error)("http_exception", **body)
    return _respond(status, body)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors and all(e.get("type") == HEX_ERROR_TYPE for e in errors):
        fields = [".".join(str(p) for p in e.get("loc", ())[1:]) for e in errors]
        return await _handle_api_error(
            request,
            BadRequest(str(errors[0].get("msg", "invalid hex input")), details={"fields": fields}),
        )
    body = _base_problem(
        request,
        status=422,
        title=_TITLES[422],
        detail="Request validation failed.",
        extras={"errors": errors},
    )
    log.warning("validation_error", path=body["instance"], errors=len(body["errors"]))
    return _respond(422, body)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    body = _base_problem(
        request,
        status=500,
        title=_TITLES[500],
        detail="An unexpected error occurred. Please retry or report the request_id.",
    )
    log.exception("unhandled_exception", **body)
    return _respond(500, body)


def install_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the given FastAPI app."""
    app.add_exception_handler(ApiError, _handle_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(TranspileError, _handle_transpile_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)


__all__ = ["install_error_handlers", "PROBLEM_CT"]

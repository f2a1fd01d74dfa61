from __future__ import annotations

"""
Request ID middleware.

- Propagates an inbound **X-Request-Id** or generates a fresh one.
- Exposes it on ``request.state.request_id`` for handlers and error mappers.
- Binds it into structlog contextvars for the lifetime of the request so
  every log line carries it.
- Echoes it back on the response.
"""

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-Id"

# Inbound ids are echoed into headers and logs; keep them short and printable.
_SAFE_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get(REQUEST_ID_HEADER.lower())
        if not req_id or not _SAFE_ID.match(req_id):
            req_id = uuid.uuid4().hex

        request.state.request_id = req_id
        bind_request_context(
            request_id=req_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response: Response = await call_next(request)
        finally:
            clear_request_context("request_id", "method", "path")

        response.headers[REQUEST_ID_HEADER] = req_id
        return response


__all__ = ["RequestIdMiddleware", "REQUEST_ID_HEADER"]

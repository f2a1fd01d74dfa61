from __future__ import annotations

"""
API error hierarchy for the proving service.

Every error carries:
  - ``status_code`` (int): HTTP status
  - ``code`` (str): stable machine code (e.g., "transpile_failed")
  - ``message`` (str): human-friendly summary
  - ``details`` (dict|None): optional structured diagnostics

``to_problem()`` returns an RFC 7807 dict; the error middleware renders it as
``application/problem+json``.

Usage
-----
    from proving_service.errors import BadRequest

    raise BadRequest("pubkey_x must be 32 bytes", details={"field": "pubkey_x"})
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .transpiler.errors import TranspileError

DEFAULT_ERROR_DOCS_BASE = "about:blank"


@dataclass
class ApiError(Exception):
    message: str
    status_code: int = 400
    code: str = "bad_request"
    details: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def title(self) -> str:
        return {
            "bad_request": "Bad Request",
            "transpile_failed": "Transpile Failed",
            "backend_unavailable": "Prover Backend Unavailable",
            "prover_error": "Prover Backend Error",
            "io_error": "I/O Error",
            "server_error": "Internal Server Error",
        }.get(self.code, self.message or "Error")

    def to_problem(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": DEFAULT_ERROR_DOCS_BASE,
            "title": self.title(),
            "status": self.status_code,
            "code": self.code,
            "detail": self.message,
        }
        if self.details:
            body["details"] = dict(self.details)
        return body


class BadRequest(ApiError):
    def __init__(self, message: str = "Bad request", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=400, code="bad_request", details=details)


class TranspileFailed(ApiError):
    def __init__(self, err: TranspileError):
        super().__init__(
            message=err.message,
            status_code=422,
            code="transpile_failed",
            details=err.to_details(),
        )


class BackendUnavailable(ApiError):
    def __init__(self, message: str = "Prover backend is not configured", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=503, code="backend_unavailable", details=details)


class ProverError(ApiError):
    """The proving backend raised; its message is passed through unchanged."""

    def __init__(self, operation: str, err: BaseException):
        super().__init__(
            message=str(err) or err.__class__.__name__,
            status_code=502,
            code="prover_error",
            details={"operation": operation, "exc_type": err.__class__.__name__},
        )


class IoError(ApiError):
    def __init__(self, err: OSError):
        details: Dict[str, Any] = {"errno": err.errno}
        if err.filename:
            details["path"] = str(err.filename)
        super().__init__(
            message=err.strerror or str(err),
            status_code=500,
            code="io_error",
            details=details,
        )


class ServerError(ApiError):
    def __init__(self, message: str = "Internal server error", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=500, code="server_error", details=details)


__all__ = [
    "ApiError",
    "BadRequest",
    "TranspileFailed",
    "BackendUnavailable",
    "ProverError",
    "IoError",
    "ServerError",
]

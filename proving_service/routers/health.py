from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..version import __version__, build_version

router = APIRouter(tags=["health"])

_PROCESS_START = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
def index() -> str:
    return "Hello, world!!!"


@router.get("/healthz", summary="Liveness probe")
def healthz() -> Dict[str, Any]:
    return {"ok": True, "uptime_s": round(max(0.0, time.time() - _PROCESS_START), 3)}


@router.get("/version", summary="Service version")
def version() -> Dict[str, Any]:
    return {"name": "proving-service", "version": __version__, "build": build_version()}

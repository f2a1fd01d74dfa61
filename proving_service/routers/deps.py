"""FastAPI dependencies reading shared objects off ``app.state``."""

from __future__ import annotations

import threading
from typing import Optional

from fastapi import Request

from ..adapters.prover import ProverBackend, load_backend
from ..config import Settings
from ..metrics import Metrics
from ..services.locks import PathLocks

_backend_lock = threading.Lock()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metrics(request: Request) -> Optional[Metrics]:
    return getattr(request.app.state, "metrics", None)


def get_locks(request: Request) -> PathLocks:
    return request.app.state.path_locks


def get_backend(request: Request) -> ProverBackend:
    """Return the app's backend, importing it from PROVER_BACKEND on first use."""
    state = request.app.state
    backend = getattr(state, "prover_backend", None)
    if backend is not None:
        return backend
    with _backend_lock:
        backend = getattr(state, "prover_backend", None)
        if backend is None:
            backend = load_backend(state.settings.prover_backend)
            state.prover_backend = backend
    return backend

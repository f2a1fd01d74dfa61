from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .adapters.prover import ProverBackend
from .config import Settings, get_settings
from .logging import setup_logging
from .metrics import setup_metrics
from .middleware.errors import install_error_handlers
from .middleware.request_id import RequestIdMiddleware
from .routers import health_router, prover_router
from .security.cors import setup_cors
from .services.locks import PathLocks
from .version import __version__


def create_app(
    settings: Optional[Settings] = None,
    *,
    backend: Optional[ProverBackend] = None,
) -> FastAPI:
    """
    FastAPI factory. Mounts routers, middleware, and metrics.

    ``backend`` injects a proving backend directly; otherwise it is imported
    from PROVER_BACKEND on the first request that needs it.
    """
    cfg = settings or get_settings()
    setup_logging(level=cfg.log_level, log_format=cfg.log_format)

    app = FastAPI(title="Proving Service", version=__version__)
    app.state.settings = cfg
    app.state.prover_backend = backend
    app.state.path_locks = PathLocks()

    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, cfg.to_cors_config())
    install_error_handlers(app)
    setup_metrics(app)

    app.include_router(health_router)
    app.include_router(prover_router)
    return app

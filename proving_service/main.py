"""
Uvicorn launcher for the proving service.

Usage:
  python -m proving_service.main [--host 0.0.0.0] [--port 8000]
                                 [--workers 1] [--reload] [--log-level info]

Defaults come from HOST / PORT / LOG_LEVEL via settings.
"""

from __future__ import annotations

import argparse
from typing import Optional

import uvicorn

from .config import get_settings


def run(host: str, port: int, *, workers: int = 1, reload: bool = False, log_level: str = "info") -> None:
    if reload and workers != 1:
        # uvicorn: reload and workers>1 are mutually exclusive
        workers = 1
    # Factory import string so each worker builds its own app and settings.
    uvicorn.run(
        "proving_service.app:create_app",
        factory=True,
        host=host,
        port=port,
        workers=workers,
        reload=reload,
        log_level=log_level.lower(),
        proxy_headers=True,
    )


def main(argv: Optional[list[str]] = None) -> None:
    cfg = get_settings()

    parser = argparse.ArgumentParser(description="Run the proving service (uvicorn)")
    parser.add_argument("--host", default=cfg.host, help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=cfg.port, help="Port (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=1, help="Number of workers (default: %(default)s)")
    parser.add_argument("--reload", action="store_true", help="Enable autoreload (dev only)")
    parser.add_argument("--log-level", default=cfg.log_level.lower(), help="Log level for uvicorn (default: %(default)s)")
    args = parser.parse_args(argv)

    run(args.host, args.port, workers=args.workers, reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()

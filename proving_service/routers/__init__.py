"""
HTTP routers.

- health : /, /healthz, /version
- prover : /setup, /prove, /prove_evm, /verify, /verifier, /transpile
"""

from __future__ import annotations

from .health import router as health_router
from .prover import router as prover_router

__all__ = ["health_router", "prover_router"]

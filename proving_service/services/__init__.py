"""
Service layer used by the HTTP routers.

- prover : key setup, proving, verification, verifier generation, transpile
- locks  : per-output-path writer serialization
"""

from __future__ import annotations

from .locks import PathLocks

__all__ = ["PathLocks"]

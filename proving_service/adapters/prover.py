"""
Adapter for the external proving backend.

The cryptography (P-256 signature circuit, key generation, proof creation
and verification, EVM verifier assembly emission) lives in a separate
library. This module only describes the calls the service makes and loads
the backend named by ``PROVER_BACKEND``:

    PROVER_BACKEND="halo2_p256.backend:Backend"

The attribute may be a backend instance or a zero-argument factory (a class
counts). If nothing is configured, or the import fails, a clear
BackendUnavailable is raised on first use rather than at startup, so the
offline transpiler routes keep working without the backend installed.
"""

from __future__ import annotations

import importlib
import logging
from typing import Optional, Protocol, Tuple, runtime_checkable

from ..errors import BackendUnavailable

log = logging.getLogger(__name__)

REQUIRED_METHODS = (
    "download_keys",
    "generate_proof",
    "verify_proof",
    "generate_verifier_assembly",
)


@runtime_checkable
class ProverBackend(Protocol):
    def download_keys(
        self, degree: int, proving_key_path: Optional[str], verifying_key_path: Optional[str]
    ) -> None:
        """Fetch or generate the proving/verifying keys and write them to the given paths."""

    def generate_proof(
        self,
        pubkey: bytes,
        r: bytes,
        s: bytes,
        msghash: bytes,
        proving_key_path: str,
        degree: int,
    ) -> bytes:
        """Prove knowledge of a valid signature (r, s) over msghash by the 64-byte pubkey x||y."""

    def verify_proof(
        self,
        proof: bytes,
        pubkey: bytes,
        msghash: bytes,
        verifying_key_path: str,
        degree: int,
    ) -> bool:
        ...

    def generate_verifier_assembly(
        self, verifying_key_path: str, degree: int, sample_proof: Optional[bytes]
    ) -> Tuple[bytes, str]:
        """Return (deployment bytecode, raw verifier assembly text)."""


def load_backend(target: Optional[str]) -> ProverBackend:
    """
    Import and return the backend named by ``target`` ("package.module:attr").

    Raises BackendUnavailable when ``target`` is empty, malformed, fails to
    import, or names an object missing any of the required methods.
    """
    if not target:
        raise BackendUnavailable("Prover backend is not configured (set PROVER_BACKEND)")

    module_path, sep, attr = target.partition(":")
    if not sep or not module_path or not attr:
        raise BackendUnavailable(
            "PROVER_BACKEND must look like 'package.module:attr'",
            details={"backend": target},
        )

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise BackendUnavailable(
            f"Prover backend module {module_path!r} failed to import: {e}",
            details={"backend": target},
        ) from e

    obj = getattr(module, attr, None)
    if obj is None:
        raise BackendUnavailable(
            f"Prover backend {module_path!r} has no attribute {attr!r}",
            details={"backend": target},
        )

    if isinstance(obj, type) or (callable(obj) and not _looks_like_backend(obj)):
        backend = obj()
    else:
        backend = obj
    missing = [m for m in REQUIRED_METHODS if not callable(getattr(backend, m, None))]
    if missing:
        raise BackendUnavailable(
            "Prover backend is missing required methods",
            details={"backend": target, "missing": missing},
        )

    log.info("prover backend loaded: %s", target)
    return backend  # type: ignore[return-value]


def _looks_like_backend(obj: object) -> bool:
    return all(callable(getattr(obj, m, None)) for m in REQUIRED_METHODS)


__all__ = ["ProverBackend", "load_backend", "REQUIRED_METHODS"]

"""
Request/response models for the HTTP API.

Submodules:
- common.py  → Bytes32, HexBytes coercion helpers
- prover.py  → setup / prove / verify / verifier / transpile payloads
"""

from __future__ import annotations

from .common import Bytes32, HexBytes, to_hex
from .prover import (ProveRequest, ProveResponse, SetupRequest, SetupResponse,
                     TranspileRequest, TranspileResponse, VerifierRequest,
                     VerifierResponse, VerifyProofRequest,
                     VerifyProofResponse)

__all__ = [
    "Bytes32",
    "HexBytes",
    "to_hex",
    "SetupRequest",
    "SetupResponse",
    "ProveRequest",
    "ProveResponse",
    "VerifyProofRequest",
    "VerifyProofResponse",
    "VerifierRequest",
    "VerifierResponse",
    "TranspileRequest",
    "TranspileResponse",
]

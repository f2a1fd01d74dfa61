from __future__ import annotations

"""
Prover routers

Endpoints:
  - POST /setup        : fetch/generate proving + verifying keys
  - GET  /setup        : same, with configured defaults
  - POST /prove        : prove a P-256 signature
  - POST /prove_evm    : alias of /prove used by the browser SDK
  - POST /verify       : verify a proof
  - POST /verifier     : emit verifier assembly, write bytecode + Solidity
  - POST /transpile    : offline assembly → Solidity (no backend needed)

These are thin shims over `proving_service.services.prover`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..adapters.prover import ProverBackend
from ..config import Settings
from ..metrics import Metrics
from ..models.prover import (ProveRequest, ProveResponse, SetupRequest,
                             SetupResponse, TranspileRequest,
                             TranspileResponse, VerifierRequest,
                             VerifierResponse, VerifyProofRequest,
                             VerifyProofResponse)
from ..services import prover as service
from ..services.locks import PathLocks
from .deps import get_backend, get_locks, get_metrics, get_settings

log = logging.getLogger(__name__)
router = APIRouter(tags=["prover"])


@router.post("/setup", summary="Fetch proving and verifying keys", response_model=SetupResponse)
def post_setup(
    req: SetupRequest,
    backend: ProverBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> SetupResponse:
    return service.setup_keys(backend, settings, req, metrics=metrics)


@router.get("/setup", summary="Fetch keys to the configured default paths", response_model=SetupResponse)
def get_setup(
    backend: ProverBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> SetupResponse:
    return service.setup_keys(backend, settings, SetupRequest(), metrics=metrics)


@router.post("/prove", summary="Prove a P-256 signature", response_model=ProveResponse)
@router.post("/prove_evm", summary="Prove a P-256 signature (SDK alias)", response_model=ProveResponse)
def post_prove(
    req: ProveRequest,
    backend: ProverBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> ProveResponse:
    return service.prove(backend, settings, req, metrics=metrics)


@router.post("/verify", summary="Verify a signature proof", response_model=VerifyProofResponse)
def post_verify(
    req: VerifyProofRequest,
    backend: ProverBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> VerifyProofResponse:
    return service.verify_proof(backend, settings, req, metrics=metrics)


@router.post("/verifier", summary="Generate a Solidity verifier for a verifying key", response_model=VerifierResponse)
def post_verifier(
    req: VerifierRequest,
    backend: ProverBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
    locks: PathLocks = Depends(get_locks),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> VerifierResponse:
    log.debug("POST /verifier vk=%s", req.verifying_key_path)
    return service.generate_verifier(backend, settings, req, locks, metrics=metrics)


@router.post("/transpile", summary="Transpile verifier assembly to Solidity", response_model=TranspileResponse)
def post_transpile(
    req: TranspileRequest,
    settings: Settings = Depends(get_settings),
    metrics: Optional[Metrics] = Depends(get_metrics),
) -> TranspileResponse:
    return service.transpile_assembly(settings, req, metrics=metrics)


def get_router() -> APIRouter:
    return router

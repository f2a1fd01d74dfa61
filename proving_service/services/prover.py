"""
Prover service: key setup, proving, verification, and verifier generation.

Only light orchestration lives here. The cryptography is delegated to the
backend adapter; assembly → Solidity conversion to the transpiler.

- setup_keys(backend, settings, req)              → SetupResponse
- prove(backend, settings, req)                   → ProveResponse
- verify_proof(backend, settings, req)            → VerifyProofResponse
- generate_verifier(backend, settings, req, ...)  → VerifierResponse
- transpile_assembly(settings, req)               → TranspileResponse

Backend exceptions surface as ProverError (502) with the backend's message;
transpile failures propagate as TranspileError and nothing is written.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from ..adapters.prover import ProverBackend
from ..config import Settings
from ..errors import ApiError, IoError, ProverError
from ..metrics import Metrics
from ..models.common import to_hex
from ..models.prover import (ProveRequest, ProveResponse, SetupRequest,
                             SetupResponse, TranspileRequest,
                             TranspileResponse, VerifierRequest,
                             VerifierResponse, VerifyProofRequest,
                             VerifyProofResponse)
from ..transpiler import TranspileError, TranspileResult, transpile
from .locks import PathLocks

log = logging.getLogger(__name__)

T = TypeVar("T")


def _call_backend(
    operation: str,
    fn: Callable[..., T],
    *args: Any,
    metrics: Optional[Metrics] = None,
) -> T:
    started = time.perf_counter()
    try:
        result = fn(*args)
    except ApiError:
        raise
    except Exception as e:
        log.warning("prover backend %s failed: %s", operation, e)
        if metrics is not None:
            metrics.record_prover_call(operation, "error", time.perf_counter() - started)
        raise ProverError(operation, e) from e
    if metrics is not None:
        metrics.record_prover_call(operation, "ok", time.perf_counter() - started)
    return result


def _write_atomic(files: Sequence[Tuple[Path, bytes]]) -> None:
    """
    Stage every file as a sibling temp file, then rename them into place back
    to back. A write that fails while staging leaves every target untouched,
    and readers never see a partial file.
    """
    staged: List[Tuple[str, Path]] = []
    try:
        for path, data in files:
            fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
            staged.append((tmp, path))
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
        while staged:
            tmp, path = staged[0]
            os.replace(tmp, path)
            staged.pop(0)
    finally:
        for tmp, _ in staged:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass


def _run_transpile(
    assembly: str,
    settings: Settings,
    metrics: Optional[Metrics],
    *,
    trim_head: Optional[int] = None,
    trim_tail: Optional[int] = None,
) -> TranspileResult:
    try:
        result = transpile(
            assembly,
            trim_head=settings.transpile_trim_head if trim_head is None else trim_head,
            trim_tail=settings.transpile_trim_tail if trim_tail is None else trim_tail,
        )
    except TranspileError as e:
        if metrics is not None:
            metrics.record_transpile(e.code)
        raise
    if metrics is not None:
        metrics.record_transpile("ok", result.buffer_word_count)
    return result


# ---------- Public API ----------


def setup_keys(backend: ProverBackend, settings: Settings, req: SetupRequest, *, metrics: Optional[Metrics] = None) -> SetupResponse:
    degree = req.degree or settings.circuit_degree
    pk = req.proving_key_path or str(settings.proving_key_path)
    vk = req.verifying_key_path or str(settings.verifying_key_path)
    log.info("downloading keys: degree=%d", degree)
    _call_backend("download_keys", backend.download_keys, degree, pk, vk, metrics=metrics)
    return SetupResponse(degree=degree, proving_key_path=pk, verifying_key_path=vk)


def prove(backend: ProverBackend, settings: Settings, req: ProveRequest, *, metrics: Optional[Metrics] = None) -> ProveResponse:
    pk = req.proving_key_path or str(settings.proving_key_path)
    log.info("proving with key %s", pk)
    proof = _call_backend(
        "generate_proof",
        backend.generate_proof,
        req.pubkey,
        req.r,
        req.s,
        req.msghash,
        pk,
        settings.circuit_degree,
        metrics=metrics,
    )
    return ProveResponse(proof=to_hex(proof))


def verify_proof(backend: ProverBackend, settings: Settings, req: VerifyProofRequest, *, metrics: Optional[Metrics] = None) -> VerifyProofResponse:
    vk = req.verifying_key_path or str(settings.verifying_key_path)
    ok = _call_backend(
        "verify_proof",
        backend.verify_proof,
        req.proof,
        req.pubkey,
        req.msghash,
        vk,
        settings.circuit_degree,
        metrics=metrics,
    )
    return VerifyProofResponse(valid=bool(ok))


def generate_verifier(
    backend: ProverBackend,
    settings: Settings,
    req: VerifierRequest,
    locks: PathLocks,
    *,
    metrics: Optional[Metrics] = None,
) -> VerifierResponse:
    """
    Emit verifier assembly, transpile it, then write the deployment bytecode
    (hex text) and the Solidity contract.

    The contract is fully built before either file is touched. Writers that
    target the same output path are serialized through ``locks``.
    """
    degree = req.degree or settings.circuit_degree
    bytecode, assembly = _call_backend(
        "generate_verifier_assembly",
        backend.generate_verifier_assembly,
        req.verifying_key_path,
        degree,
        req.sample_proof,
        metrics=metrics,
    )
    result = _run_transpile(assembly, settings, metrics)

    sol_path = Path(req.solidity_output_path)
    code_path = Path(req.deployment_bytecode_output_path)
    try:
        with locks.hold(sol_path, code_path):
            _write_atomic(
                [
                    (code_path, bytes(bytecode).hex().encode("ascii")),
                    (sol_path, result.contract.encode("utf-8")),
                ]
            )
    except OSError as e:
        raise IoError(e) from e

    log.info(
        "verifier written: sol=%s bytecode=%s transcript_words=%d",
        sol_path,
        code_path,
        result.buffer_word_count,
    )
    return VerifierResponse(
        assembly=assembly,
        solidity_output_path=str(sol_path),
        deployment_bytecode_output_path=str(code_path),
        buffer_word_count=result.buffer_word_count,
        num_pub_inputs=result.num_pub_inputs,
    )


def transpile_assembly(settings: Settings, req: TranspileRequest, *, metrics: Optional[Metrics] = None) -> TranspileResponse:
    result = _run_transpile(
        req.assembly,
        settings,
        metrics,
        trim_head=req.trim_head,
        trim_tail=req.trim_tail,
    )
    return TranspileResponse(
        contract=result.contract,
        buffer_word_count=result.buffer_word_count,
        num_pub_inputs=result.num_pub_inputs,
        transcript_offsets=len(result.transcript_offsets),
    )


__all__ = [
    "setup_keys",
    "prove",
    "verify_proof",
    "generate_verifier",
    "transpile_assembly",
]

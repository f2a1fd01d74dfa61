from __future__ import annotations

"""
Prover & verifier-generation models.

- SetupRequest/SetupResponse:        fetch proving/verifying keys
- ProveRequest/ProveResponse:        prove a P-256 signature (r, s) over msghash
- VerifyProofRequest/...Response:    check a proof against a verifying key
- VerifierRequest/VerifierResponse:  emit verifier assembly, write bytecode +
                                     transpiled Solidity to caller paths
- TranspileRequest/...Response:      offline assembly → Solidity

Notes
-----
Paths are taken as given; the service does not sandbox them. Unset key paths
fall back to PROVING_KEY_PATH / VERIFYING_KEY_PATH.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Bytes32, HexBytes


class SetupRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    degree: Optional[int] = Field(default=None, ge=1, le=28, description="Circuit size k.")
    proving_key_path: Optional[str] = Field(default=None, description="Where to write the proving key.")
    verifying_key_path: Optional[str] = Field(default=None, description="Where to write the verifying key.")


class SetupResponse(BaseModel):
    ok: bool = True
    degree: int
    proving_key_path: str
    verifying_key_path: str


class ProveRequest(BaseModel):
    """
    Fields
    ------
    r, s: Bytes32
        Signature halves.
    pubkey_x, pubkey_y: Bytes32
        Uncompressed P-256 public key coordinates.
    msghash: Bytes32
        The signed message digest.
    proving_key_path: Optional[str]
        Proving key to use; defaults to PROVING_KEY_PATH.
    """

    model_config = ConfigDict(extra="forbid")

    r: Bytes32
    s: Bytes32
    pubkey_x: Bytes32
    pubkey_y: Bytes32
    msghash: Bytes32
    proving_key_path: Optional[str] = None

    @property
    def pubkey(self) -> bytes:
        return self.pubkey_x + self.pubkey_y


class ProveResponse(BaseModel):
    proof: str = Field(..., description="0x-hex encoded proof.")


class VerifyProofRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    proof: HexBytes
    pubkey_x: Bytes32
    pubkey_y: Bytes32
    msghash: Bytes32
    verifying_key_path: Optional[str] = None

    @property
    def pubkey(self) -> bytes:
        return self.pubkey_x + self.pubkey_y


class VerifyProofResponse(BaseModel):
    valid: bool


class VerifierRequest(BaseModel):
    """
    Generate an on-chain verifier for a verifying key.

    The raw assembly comes back untouched in the response; the deployment
    bytecode and the transpiled contract are written to the given paths.
    """

    model_config = ConfigDict(extra="forbid")

    verifying_key_path: str
    solidity_output_path: str
    deployment_bytecode_output_path: str
    sample_proof: Optional[HexBytes] = Field(
        default=None, description="Optional proof used by the backend to sanity-check the verifier."
    )
    degree: Optional[int] = Field(default=None, ge=1, le=28)


class VerifierResponse(BaseModel):
    assembly: str
    solidity_output_path: str
    deployment_bytecode_output_path: str
    buffer_word_count: int
    num_pub_inputs: int


class TranspileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assembly: str = Field(..., min_length=1, description="Raw verifier assembly listing.")
    trim_head: Optional[int] = Field(default=None, ge=0)
    trim_tail: Optional[int] = Field(default=None, ge=0)


class TranspileResponse(BaseModel):
    contract: str
    buffer_word_count: int
    num_pub_inputs: int
    transcript_offsets: int = Field(..., description="Number of transcript references rewritten.")


__all__ = [
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

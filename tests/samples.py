"""Sample verifier listing and an in-process proving backend for tests."""

from __future__ import annotations

from typing import List, Optional, Tuple

# ----------------------------
# Sample verifier assembly
# ----------------------------
# 16 wrapper lines, a 15-line verification body (listing lines 16..30) and
# 7 closing wrapper lines. Public inputs are written on lines 16..18 and the
# closing write is on line 19, so three public-input words are expected.
ASSEMBLY_HEAD: List[str] = [
    'object "plonk_verifier" {',
    "    code {",
    "        function allocate(size) -> ptr {",
    "            ptr := 0x80",
    "        }",
    '        let size := datasize("Runtime")',
    '        let offset := dataoffset("Runtime")',
    "        codecopy(0, offset, size)",
    "        return(0, size)",
    "    }",
    '    object "Runtime" {',
    "        code {",
    "            let success:bool := true",
    "            let f_p := 0x30644e72e131a029b85045b68181585d97816a916871ca8d3c208c16d87cfd47",
    "            let f_q := 0x30644e72e131a029b85045b68181585d2833e84879b9709143e1f593f0000001",
    "            {",
]

ASSEMBLY_BODY: List[str] = [
    "            mstore(0x20, mod(calldataload(0x0), f_q))",
    "            mstore(0x40, mod(calldataload(0x20), f_q))",
    "            mstore(0x60, mod(calldataload(0x40), f_q))",
    "            mstore(0x0, f_q)",
    "            mstore(0x80, mod(calldataload(0x60), f_q))",
    "            mstore(0xa0, mod(calldataload(0x80), f_q))",
    "            mstore8(17, 1)",
    "            mstore(192, mload(0x80))",
    "            success := and(success, staticcall(gas(), 0x5, 0xa0, 0xc0, 0xc0, 0x20))",
    "            mstore(0x100, keccak256(0x0, 0xe0))",
    "            mstore(0x120, addmod(mload(0x20), mload(0x40), f_q))",
    "            success := and(success, staticcall(gas(), 0x7, 0x140, 0x60, 0x140, 0x40))",
    "            success := and(success, staticcall(gas(), 0x6, 0x140, 0x80, 0x140, 0x40))",
    "            success := and(success, staticcall(gas(), 0x8, 0x180, 0x180, 0x300, 0x20))",
    "            success := and(success, eq(mload(0x300), 1))",
]

ASSEMBLY_TAIL: List[str] = [
    "            if not(success) {",
    "                revert(0, 0)",
    "            }",
    "            return(0, 0)",
    "        }",
    "    }",
    "}",
]

ASSEMBLY_LINES: List[str] = ASSEMBLY_HEAD + ASSEMBLY_BODY + ASSEMBLY_TAIL
ASSEMBLY_TEXT = "\n".join(ASSEMBLY_LINES) + "\n"

# Highest transcript offset in the body is 0x300; the buffer needs the word
# starting there too.
ASSEMBLY_WORDS = 0x300 // 32 + 1

DEPLOYMENT_BYTECODE = bytes.fromhex("6080604052348015600f57600080fd5b50")


class FakeBackend:
    """In-process stand-in for the proving library; records every call."""

    def __init__(self, assembly: str = ASSEMBLY_TEXT) -> None:
        self.assembly = assembly
        self.calls: List[Tuple[str, tuple]] = []
        self.fail_with: Optional[Exception] = None

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))
        if self.fail_with is not None:
            raise self.fail_with

    def download_keys(self, degree, proving_key_path, verifying_key_path) -> None:
        self._record("download_keys", degree, proving_key_path, verifying_key_path)

    def generate_proof(self, pubkey, r, s, msghash, proving_key_path, degree) -> bytes:
        self._record("generate_proof", pubkey, r, s, msghash, proving_key_path, degree)
        return b"\xde\xad" + msghash[:2]

    def verify_proof(self, proof, pubkey, msghash, verifying_key_path, degree) -> bool:
        self._record("verify_proof", proof, pubkey, msghash, verifying_key_path, degree)
        return proof[:2] == b"\xde\xad"

    def generate_verifier_assembly(self, verifying_key_path, degree, sample_proof):
        self._record("generate_verifier_assembly", verifying_key_path, degree, sample_proof)
        return DEPLOYMENT_BYTECODE, self.assembly



from __future__ import annotations

"""
Value types shared by the transpiler stages.

- RefKind / Buffer: what a raw reference is, and where it lands.
- AddressReference: a parsed memory or calldata access from one line.
- RewrittenReference: the named-buffer location it was relocated to.
- Boundary: public-input sentinels found by the scanner.
- TranspileResult: everything the pipeline produced for one listing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

WORD_SIZE = 32


class RefKind(str, Enum):
    calldata_load = "calldataload"
    store32 = "mstore"
    store8 = "mstore8"
    load = "mload"
    keccak = "keccak256"
    modexp = "modexp"
    ec_mul = "ecmul"
    ec_add = "ecadd"
    ec_pairing = "ecpairing"


class Buffer(str, Enum):
    pub_inputs = "pubInputs"
    proof = "proof"
    transcript = "transcript"


@dataclass(frozen=True)
class AddressReference:
    kind: RefKind
    raw_operand: str
    numeric_offset: int


@dataclass(frozen=True)
class RewrittenReference:
    target: Buffer
    resolved_offset: int

    @property
    def operand(self) -> str:
        """Solidity-assembly pointer expression, e.g. ``add(transcript, 0x40)``."""
        return f"add({self.target.value}, {hex(self.resolved_offset)})"


@dataclass(frozen=True)
class Boundary:
    """
    Ordinals of the public-input sentinels.

    ``start`` is the last public-input write seen before the closing write;
    ``end`` is the closing write that stopped the scan.
    """

    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def num_pub_inputs(self) -> int:
        if self.start is None or self.end is None:
            return 0
        return max(0, self.end - self.start)

    @property
    def max_pub_input_addr(self) -> int:
        n = self.num_pub_inputs
        return n * WORD_SIZE - WORD_SIZE if n > 0 else 0

    @property
    def pub_input_limit(self) -> Optional[int]:
        """Highest calldata offset still inside ``pubInputs``; None when the region is empty."""
        return self.max_pub_input_addr if self.num_pub_inputs > 0 else None


@dataclass
class TranspileResult:
    contract: str
    boundary: Boundary
    lines: List[str]
    transcript_offsets: Tuple[int, ...]
    buffer_word_count: int
    references: List[Tuple[AddressReference, RewrittenReference]] = field(default_factory=list)

    @property
    def num_pub_inputs(self) -> int:
        return self.boundary.num_pub_inputs


__all__ = [
    "WORD_SIZE",
    "RefKind",
    "Buffer",
    "AddressReference",
    "RewrittenReference",
    "Boundary",
    "TranspileResult",
]

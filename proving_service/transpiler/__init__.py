"""
Verifier assembly → Solidity transpiler.

Turns the flat calldata/memory assembly emitted for a verifying key into a
``Verifier`` contract that reads its public inputs and proof from function
arguments and keeps intermediate values in a fixed ``transcript`` buffer.

Submodules:
- scanner.py   → public-input boundary detection
- rules.py     → ordered rewrite rule table
- engine.py    → per-line rule application and offset bookkeeping
- sizer.py     → transcript buffer sizing
- assembler.py → boilerplate trimming and contract template
- pipeline.py  → ``transpile`` / ``transpile_file``
"""

from __future__ import annotations

from .assembler import DEFAULT_TRIM_HEAD, DEFAULT_TRIM_TAIL, assemble_contract
from .engine import RewriteEngine, rewrite_line
from .errors import (EmptyTranscriptError, ListingTooShortError,
                     MalformedLiteralError, TranspileError)
from .pipeline import transpile, transpile_file
from .scanner import scan_boundary
from .sizer import buffer_word_count
from .types import (AddressReference, Boundary, Buffer, RefKind,
                    RewrittenReference, TranspileResult)

__all__ = [
    "transpile",
    "transpile_file",
    "scan_boundary",
    "RewriteEngine",
    "rewrite_line",
    "buffer_word_count",
    "assemble_contract",
    "DEFAULT_TRIM_HEAD",
    "DEFAULT_TRIM_TAIL",
    "TranspileError",
    "MalformedLiteralError",
    "EmptyTranscriptError",
    "ListingTooShortError",
    "AddressReference",
    "RewrittenReference",
    "Boundary",
    "Buffer",
    "RefKind",
    "TranspileResult",
]

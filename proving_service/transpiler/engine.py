from __future__ import annotations

"""
Rewrite engine.

Walks the listing line by line, running every rule of :data:`RULES` in order
over a mutable copy of the line. Rewriters call back into
:class:`RewriteState` to resolve where a raw offset lands and to record the
transcript offsets the buffer sizer needs.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .rules import RULES, Rule, parse_offset
from .types import (WORD_SIZE, AddressReference, Buffer, RefKind,
                    RewrittenReference)

log = logging.getLogger(__name__)


@dataclass
class RewriteState:
    """
    Per-transpile bookkeeping. Never shared between calls.

    ``max_pub_input_addr`` is None when the listing has no public-input
    region; every calldata read then lands in ``proof``.
    """

    max_pub_input_addr: Optional[int] = None
    line_no: int = 0
    offsets: List[int] = field(default_factory=list)
    references: List[Tuple[AddressReference, RewrittenReference]] = field(default_factory=list)

    def relocate_calldata(self, literal: str) -> RewrittenReference:
        raw = parse_offset(literal, 16, line_no=self.line_no)
        limit = self.max_pub_input_addr
        if limit is not None and raw <= limit:
            # pubInputs is a memory array; skip its length word
            ref = RewrittenReference(Buffer.pub_inputs, raw + WORD_SIZE)
        else:
            ref = RewrittenReference(Buffer.proof, raw - (limit or 0))
        self.references.append((AddressReference(RefKind.calldata_load, literal, raw), ref))
        return ref

    def to_transcript(self, kind: RefKind, literal: str, base: int) -> RewrittenReference:
        raw = parse_offset(literal, base, line_no=self.line_no)
        ref = RewrittenReference(Buffer.transcript, raw)
        self.offsets.append(raw)
        self.references.append((AddressReference(kind, literal, raw), ref))
        return ref


class RewriteEngine:
    """
    Apply the rule table to assembly lines.

    Usage:
        engine = RewriteEngine(max_pub_input_addr=0x40)
        out = engine.rewrite_lines(lines)
        engine.state.offsets  # transcript offsets seen
    """

    def __init__(self, max_pub_input_addr: Optional[int] = None, rules: Sequence[Rule] = RULES) -> None:
        self.rules = tuple(rules)
        self.state = RewriteState(max_pub_input_addr=max_pub_input_addr)

    def rewrite_line(self, line: str, line_no: int = 0) -> str:
        self.state.line_no = line_no
        for rule in self.rules:
            line = rule.apply(line, self.state)
        return line

    def rewrite_lines(self, lines: Iterable[str]) -> List[str]:
        out = [self.rewrite_line(line, i) for i, line in enumerate(lines)]
        log.debug(
            "rewrote %d lines, %d transcript offsets recorded",
            len(out),
            len(self.state.offsets),
        )
        return out


def rewrite_line(line: str, max_pub_input_addr: Optional[int] = None) -> Tuple[str, List[int]]:
    """Rewrite a single line; return the new text and the transcript offsets it recorded."""
    engine = RewriteEngine(max_pub_input_addr)
    return engine.rewrite_line(line), list(engine.state.offsets)


__all__ = ["RewriteEngine", "RewriteState", "rewrite_line"]

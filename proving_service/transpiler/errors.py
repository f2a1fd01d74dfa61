from __future__ import annotations

"""
Transpiler error hierarchy.

Every failure raised while turning verifier assembly into Solidity derives
from :class:`TranspileError`. None of them are recoverable locally: a
half-rewritten verifier is worse than no verifier, so callers abort and
report.

The HTTP layer maps these onto ``problem+json`` responses; the transpiler
itself stays framework-agnostic.
"""

from typing import Any, Dict, Optional


class TranspileError(Exception):
    """Base class for all transpile failures."""

    code = "transpile_failed"

    def __init__(self, message: str, *, line_no: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_no = line_no

    def to_details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"reason": self.code}
        if self.line_no is not None:
            details["line"] = self.line_no
        return details


class MalformedLiteralError(TranspileError):
    """An offset literal did not parse under the base its pattern expects."""

    code = "malformed_literal"

    def __init__(self, literal: str, base: int, *, line_no: Optional[int] = None) -> None:
        super().__init__(
            f"offset literal {literal!r} is not a valid base-{base} offset",
            line_no=line_no,
        )
        self.literal = literal
        self.base = base

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        details.update(literal=self.literal, base=self.base)
        return details


class EmptyTranscriptError(TranspileError):
    """No transcript offsets were recorded; the assembly shape is unsupported."""

    code = "empty_transcript"

    def __init__(self) -> None:
        super().__init__("no transcript memory references found in assembly")


class ListingTooShortError(TranspileError):
    """The listing has no body left after trimming wrapper boilerplate."""

    code = "listing_too_short"

    def __init__(self, lines: int, head: int, tail: int) -> None:
        super().__init__(
            f"assembly has {lines} lines; need more than {head + tail} to trim "
            f"{head} leading and {tail} trailing wrapper lines"
        )
        self.lines = lines
        self.head = head
        self.tail = tail


__all__ = [
    "TranspileError",
    "MalformedLiteralError",
    "EmptyTranscriptError",
    "ListingTooShortError",
]

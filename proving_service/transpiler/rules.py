from __future__ import annotations

"""
Rewrite rule table.

Each rule pairs a precompiled pattern with a rewriter. A pattern exposes the
text it replaces as the named group ``ref``; only that span is rewritten, the
rest of the line (value expressions, gas, length literals) is left alone.

Rules run in table order against the *current* text of a line, so the output
of an earlier rule is what a later rule sees. The order is significant:

    :bool strip → calldataload → mstore8 (dec) → mstore (dec)
    → modexp → ecMul → ecAdd → ecPairing
    → mstore (hex) → keccak256 → mload (repeated)
"""

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import TYPE_CHECKING, Callable, Tuple

from .errors import MalformedLiteralError
from .types import RefKind

if TYPE_CHECKING:  # pragma: no cover
    from .engine import RewriteState

HEX = r"0x[0-9a-fA-F]+"
MAX_OFFSET = 0xFFFFFFFF

# EVM precompile addresses with their fixed input/output lengths.
PRECOMPILES: Tuple[Tuple[RefKind, str, str, str], ...] = (
    (RefKind.modexp, "0x5", "0xc0", "0x20"),
    (RefKind.ec_mul, "0x7", "0x60", "0x40"),
    (RefKind.ec_add, "0x6", "0x80", "0x40"),
    (RefKind.ec_pairing, "0x8", "0x180", "0x20"),
)


def parse_offset(literal: str, base: int, *, line_no: int | None = None) -> int:
    """
    Parse an offset literal under ``base`` (16 requires a ``0x`` prefix).

    Raises MalformedLiteralError on a bad literal or one that does not fit a
    32-bit memory offset.
    """
    digits = literal
    if base == 16:
        if not literal.lower().startswith("0x"):
            raise MalformedLiteralError(literal, base, line_no=line_no)
        digits = literal[2:]
    try:
        value = int(digits, base)
    except ValueError:
        raise MalformedLiteralError(literal, base, line_no=line_no) from None
    if value < 0 or value > MAX_OFFSET:
        raise MalformedLiteralError(literal, base, line_no=line_no)
    return value


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: Pattern[str]
    rewrite: Callable[[Match[str], "RewriteState"], str]
    repeat: bool = False

    def apply(self, line: str, state: "RewriteState") -> str:
        while True:
            m = self.pattern.search(line)
            if m is None:
                return line
            lo, hi = m.span("ref")
            line = line[:lo] + self.rewrite(m, state) + line[hi:]
            if not self.repeat:
                return line


# ------------------------------- rewriters ---------------------------------


def _strip_bool(m: Match[str], state: "RewriteState") -> str:
    return ""


def _calldataload(m: Match[str], state: "RewriteState") -> str:
    ref = state.relocate_calldata(m.group("addr"))
    return f"mload({ref.operand})"


def _store(kind: RefKind, base: int) -> Callable[[Match[str], "RewriteState"], str]:
    op = kind.value

    def rewrite(m: Match[str], state: "RewriteState") -> str:
        ref = state.to_transcript(kind, m.group("addr"), base)
        return f"{op}({ref.operand}"

    return rewrite


def _precompile(kind: RefKind, address: str, in_len: str, out_len: str):
    def rewrite(m: Match[str], state: "RewriteState") -> str:
        src = state.to_transcript(kind, m.group("src"), 16)
        dst = state.to_transcript(kind, m.group("dst"), 16)
        return f"staticcall(gas(), {address}, {src.operand}, {in_len}, {dst.operand}, {out_len}"

    return rewrite


def _keccak(m: Match[str], state: "RewriteState") -> str:
    ref = state.to_transcript(RefKind.keccak, m.group("addr"), 16)
    return f"keccak256({ref.operand}"


def _mload(m: Match[str], state: "RewriteState") -> str:
    ref = state.to_transcript(RefKind.load, m.group("addr"), 16)
    return f"mload({ref.operand}"


def _precompile_pattern(address: str, in_len: str, out_len: str) -> Pattern[str]:
    return re.compile(
        rf"(?P<ref>staticcall\(gas\(\),\s*{re.escape(address)},\s*(?P<src>{HEX}),\s*"
        rf"{re.escape(in_len)},\s*(?P<dst>{HEX}),\s*{re.escape(out_len)})(?![0-9a-fA-Fx])"
    )


# --------------------------------- table -----------------------------------

RULES: Tuple[Rule, ...] = (
    Rule("strip_bool", re.compile(r"(?P<ref>:bool)"), _strip_bool, repeat=True),
    Rule(
        "calldataload",
        re.compile(rf"(?P<ref>calldataload\((?P<addr>{HEX})\))"),
        _calldataload,
        repeat=True,
    ),
    Rule(
        "mstore8_dec",
        re.compile(r"^\s*(?P<ref>mstore8\((?P<addr>[0-9]+)),.+\)"),
        _store(RefKind.store8, 10),
    ),
    Rule(
        "mstore_dec",
        re.compile(r"^\s*(?P<ref>mstore\((?P<addr>[0-9]+)),.+\)"),
        _store(RefKind.store32, 10),
    ),
    *(
        Rule(kind.value, _precompile_pattern(addr, in_len, out_len), _precompile(kind, addr, in_len, out_len))
        for kind, addr, in_len, out_len in PRECOMPILES
    ),
    Rule(
        "mstore_hex",
        re.compile(rf"^\s*(?P<ref>mstore\((?P<addr>{HEX})),.+\)"),
        _store(RefKind.store32, 16),
    ),
    Rule(
        "keccak256",
        re.compile(rf"(?P<ref>keccak256\((?P<addr>{HEX}))"),
        _keccak,
    ),
    Rule(
        "mload",
        re.compile(rf"(?P<ref>mload\((?P<addr>{HEX}))\)"),
        _mload,
        repeat=True,
    ),
)


__all__ = ["Rule", "RULES", "PRECOMPILES", "MAX_OFFSET", "parse_offset"]

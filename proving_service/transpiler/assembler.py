from __future__ import annotations

"""
Contract assembler: trim wrapper boilerplate and wrap the verification body
in the ``Verifier`` Solidity template.

Trimming is positional. The generator wraps the verification body in a fixed
object/code preamble and a fixed revert/return epilogue; the defaults below
match that shape and can be overridden through settings.
"""

from typing import Sequence

from .errors import ListingTooShortError

DEFAULT_TRIM_HEAD = 16
DEFAULT_TRIM_TAIL = 7

CONTRACT_HEADER = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.17;

contract Verifier {{
    function verify(
        uint256[] memory pubInputs,
        bytes memory proof
    ) public view returns (bool) {{
        bool success = true;
        bytes32[{words}] memory transcript;
        assembly {{
"""

CONTRACT_FOOTER = """\
        }
        return success;
    }
}
"""


def trim_body(
    lines: Sequence[str],
    head: int = DEFAULT_TRIM_HEAD,
    tail: int = DEFAULT_TRIM_TAIL,
) -> Sequence[str]:
    """Drop ``head`` leading and ``tail`` trailing wrapper lines."""
    if head < 0 or tail < 0:
        raise ValueError("trim counts must be non-negative")
    if len(lines) <= head + tail:
        raise ListingTooShortError(len(lines), head, tail)
    return lines[head:len(lines) - tail]


def assemble_contract(
    lines: Sequence[str],
    buffer_words: int,
    *,
    head: int = DEFAULT_TRIM_HEAD,
    tail: int = DEFAULT_TRIM_TAIL,
) -> str:
    body = "\n".join(trim_body(lines, head, tail))
    return CONTRACT_HEADER.format(words=buffer_words) + body + "\n" + CONTRACT_FOOTER


__all__ = [
    "DEFAULT_TRIM_HEAD",
    "DEFAULT_TRIM_TAIL",
    "CONTRACT_HEADER",
    "CONTRACT_FOOTER",
    "trim_body",
    "assemble_contract",
]

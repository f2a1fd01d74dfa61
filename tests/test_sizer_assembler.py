from __future__ import annotations

import pytest

from proving_service.transpiler import (EmptyTranscriptError,
                                        ListingTooShortError,
                                        assemble_contract, buffer_word_count)
from proving_service.transpiler.assembler import (CONTRACT_FOOTER,
                                                  CONTRACT_HEADER, trim_body)


def test_buffer_word_count_uses_highest_offset():
    assert buffer_word_count([0x20, 0x300, 0x11]) == 25
    assert buffer_word_count([0x3f]) == 2
    assert buffer_word_count([0x0]) == 1


@pytest.mark.parametrize("offsets", [[0x0], [17], [0x1f], [0x20], [0x3f], [0x40, 0x11], [0x300, 0x301]])
def test_buffer_holds_the_highest_word(offsets):
    words = buffer_word_count(offsets)
    assert words >= 1
    assert words * 32 >= max(offsets) + 32


def test_buffer_word_count_accepts_any_iterable():
    assert buffer_word_count(iter([0x40, 0x80])) == 5


def test_buffer_word_count_requires_offsets():
    with pytest.raises(EmptyTranscriptError) as info:
        buffer_word_count([])
    assert info.value.code == "empty_transcript"


def test_trim_body_drops_wrapper_lines():
    lines = [f"l{i}" for i in range(30)]
    assert list(trim_body(lines)) == [f"l{i}" for i in range(16, 23)]
    assert list(trim_body(lines, head=2, tail=3)) == [f"l{i}" for i in range(2, 27)]
    assert list(trim_body(lines, head=0, tail=0)) == lines


def test_trim_body_needs_a_body():
    with pytest.raises(ListingTooShortError) as info:
        trim_body([f"l{i}" for i in range(23)])
    assert (info.value.lines, info.value.head, info.value.tail) == (23, 16, 7)

    # one line past the wrappers is enough
    assert list(trim_body([f"l{i}" for i in range(24)])) == ["l16"]


def test_trim_body_rejects_negative_counts():
    with pytest.raises(ValueError):
        trim_body(["a", "b"], head=-1, tail=0)


def test_assemble_contract_layout():
    lines = ["h0", "h1", "    body one", "    body two", "t0"]
    contract = assemble_contract(lines, 5, head=2, tail=1)

    assert contract.startswith("// SPDX-License-Identifier: MIT\npragma solidity ^0.8.17;\n")
    assert contract == CONTRACT_HEADER.format(words=5) + "    body one\n    body two\n" + CONTRACT_FOOTER
    assert "bytes32[5] memory transcript;" in contract
    assert "function verify(\n        uint256[] memory pubInputs,\n        bytes memory proof\n    ) public view returns (bool) {" in contract
    assert "bool success = true;" in contract
    assert contract.endswith("        }\n        return success;\n    }\n}\n")
    assert "h0" not in contract and "t0" not in contract


def test_assemble_contract_keeps_body_verbatim():
    body = ["\t  let a := 1  ", "", "    // comment"]
    contract = assemble_contract(["h"] + body + ["t"], 1, head=1, tail=1)
    assert "\n".join(body) + "\n" + CONTRACT_FOOTER in contract

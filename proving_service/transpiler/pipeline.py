from __future__ import annotations

"""
Transpile pipeline: scanner → rewrite engine → sizer → assembler.

    from proving_service.transpiler import transpile

    result = transpile(assembly_text)
    result.contract            # Solidity source
    result.buffer_word_count   # bytes32[N] transcript size

All state lives in the call; concurrent transpiles of different inputs need
no coordination. Nothing is written until the whole contract is built.
"""

import logging
from pathlib import Path
from typing import Sequence, Union

from .assembler import DEFAULT_TRIM_HEAD, DEFAULT_TRIM_TAIL, assemble_contract
from .engine import RewriteEngine
from .scanner import scan_boundary
from .sizer import buffer_word_count
from .types import TranspileResult

log = logging.getLogger(__name__)


def _as_lines(assembly: Union[str, Sequence[str]]) -> Sequence[str]:
    # Only "\n" ends a line. str.splitlines also splits on control and
    # Unicode separators that may appear inside comments.
    if isinstance(assembly, str):
        lines = assembly.split("\n")
        if lines[-1] == "":
            lines.pop()
        return tuple(line[:-1] if line.endswith("\r") else line for line in lines)
    return tuple(line.rstrip("\r\n") for line in assembly)


def transpile(
    assembly: Union[str, Sequence[str]],
    *,
    trim_head: int = DEFAULT_TRIM_HEAD,
    trim_tail: int = DEFAULT_TRIM_TAIL,
) -> TranspileResult:
    """
    Rewrite verifier assembly against ``pubInputs``/``proof``/``transcript``
    and wrap it into the ``Verifier`` contract.

    Raises
    ------
    TranspileError
        On a malformed offset literal, an empty transcript, or a listing too
        short to trim.
    """
    lines = _as_lines(assembly)

    boundary = scan_boundary(lines)
    engine = RewriteEngine(max_pub_input_addr=boundary.pub_input_limit)
    rewritten = engine.rewrite_lines(lines)

    words = buffer_word_count(engine.state.offsets)
    contract = assemble_contract(rewritten, words, head=trim_head, tail=trim_tail)

    log.info(
        "transpiled %d lines: num_pub_inputs=%d transcript_words=%d",
        len(lines),
        boundary.num_pub_inputs,
        words,
    )
    return TranspileResult(
        contract=contract,
        boundary=boundary,
        lines=rewritten,
        transcript_offsets=tuple(engine.state.offsets),
        buffer_word_count=words,
        references=list(engine.state.references),
    )


def transpile_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    *,
    trim_head: int = DEFAULT_TRIM_HEAD,
    trim_tail: int = DEFAULT_TRIM_TAIL,
) -> TranspileResult:
    """Transpile the listing at ``input_path`` and write the contract to ``output_path``."""
    text = Path(input_path).read_text(encoding="utf-8")
    result = transpile(text, trim_head=trim_head, trim_tail=trim_tail)
    Path(output_path).write_text(result.contract, encoding="utf-8")
    return result


__all__ = ["transpile", "transpile_file"]

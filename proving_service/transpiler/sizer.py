from __future__ import annotations

from typing import Iterable

from .errors import EmptyTranscriptError
from .types import WORD_SIZE


def buffer_word_count(offsets: Iterable[int]) -> int:
    """
    Number of 32-byte words the ``transcript`` buffer must declare.

    ``add(transcript, off)`` addresses the word spanning ``off`` to
    ``off + 32``, so the buffer holds ``max(offsets) // 32 + 1`` words. That
    covers the highest access even when it is not word-aligned, and it never
    declares ``bytes32[0]``, which Solidity rejects.
    """
    highest = max(offsets, default=None)
    if highest is None:
        raise EmptyTranscriptError()
    return highest // WORD_SIZE + 1


__all__ = ["buffer_word_count"]

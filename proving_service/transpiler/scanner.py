from __future__ import annotations

"""
Boundary scanner.

The verifier assembly writes public inputs into low memory with a run of
``mstore(0x20, ...)`` lines and closes the run with ``mstore(0x0, ...)``.
The distance between the last public-input write and that closing write is
the number of public-input words; the rewrite engine needs it to split
``calldataload`` offsets between the ``pubInputs`` and ``proof`` buffers.
"""

import logging
from typing import Iterable

from .types import Boundary

log = logging.getLogger(__name__)

PUB_INPUT_SENTINEL = "mstore(0x20"
CLOSING_SENTINEL = "mstore(0x0"


def scan_boundary(lines: Iterable[str]) -> Boundary:
    """
    Locate the public-input sentinels in ``lines``.

    The scan stops at the first closing write. ``start`` keeps being
    overwritten by every public-input write before that point, so the
    boundary is measured from the *last* such write.
    """
    start = None
    end = None
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith(PUB_INPUT_SENTINEL):
            start = i
        if stripped.startswith(CLOSING_SENTINEL):
            end = i
            break

    boundary = Boundary(start=start, end=end)
    log.debug(
        "boundary scan: start=%s end=%s num_pub_inputs=%d",
        start,
        end,
        boundary.num_pub_inputs,
    )
    return boundary


__all__ = ["scan_boundary", "PUB_INPUT_SENTINEL", "CLOSING_SENTINEL"]

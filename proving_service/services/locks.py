from __future__ import annotations

"""
Per-path writer locks.

Two requests writing the same output file must not interleave; requests on
different files run concurrently. Locks are keyed by the resolved absolute
path and always taken in sorted order, so overlapping multi-path holds
cannot deadlock.

An entry lives only while some request holds or waits on it, so a
long-running server does not accumulate one lock per path ever written.
"""

import threading
from contextlib import ExitStack, contextmanager
from os import PathLike
from pathlib import Path
from typing import Dict, Iterator, Union


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class PathLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, _Entry] = {}

    def _acquire(self, key: str) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
        entry.lock.acquire()
        return entry

    def _release(self, key: str, entry: _Entry) -> None:
        entry.lock.release()
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, *paths: Union[str, PathLike]) -> Iterator[None]:
        keys = sorted({str(Path(p).resolve()) for p in paths})
        with ExitStack() as stack:
            for key in keys:
                entry = self._acquire(key)
                stack.callback(self._release, key, entry)
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


__all__ = ["PathLocks"]

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class PathLockRegistry:
    """In-process locks keyed by upload target path.

    Serializes append-mode chunk writes and side-directory assembly for one
    upload. Entries are dropped once no request holds or waits on them.
    Requests served by other processes are not covered.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                lock, users = self._locks[key]
                if users == 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

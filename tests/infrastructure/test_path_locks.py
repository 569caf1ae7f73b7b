"""Tests for the per-path lock registry."""

from __future__ import annotations

import threading
import time

import pytest

from infrastructure.upload_engine.path_locks import PathLockRegistry


class TestPathLockRegistry:
    def test_entries_dropped_after_release(self) -> None:
        locks = PathLockRegistry()

        with locks.hold("/srv/a.bin"):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_released_when_body_raises(self) -> None:
        locks = PathLockRegistry()

        with pytest.raises(RuntimeError), locks.hold("/srv/a.bin"):
            raise RuntimeError

        assert len(locks) == 0

    def test_same_path_is_serialized(self) -> None:
        locks = PathLockRegistry()
        events: list[str] = []

        def worker() -> None:
            with locks.hold("/srv/a.bin"):
                events.append("worker")

        with locks.hold("/srv/a.bin"):
            thread = threading.Thread(target=worker)
            thread.start()
            time.sleep(0.1)
            events.append("main")

        thread.join(timeout=5)
        assert events == ["main", "worker"]
        assert len(locks) == 0

    def test_different_paths_do_not_block(self) -> None:
        locks = PathLockRegistry()
        acquired = threading.Event()

        def worker() -> None:
            with locks.hold("/srv/b.bin"):
                acquired.set()

        with locks.hold("/srv/a.bin"):
            thread = threading.Thread(target=worker)
            thread.start()
            assert acquired.wait(timeout=5)

        thread.join(timeout=5)

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from domain.value_objects.upload_paths import PART_SUFFIX

if TYPE_CHECKING:
    from datetime import timedelta

logger = structlog.get_logger()


class FilesystemPartialUploadJanitor:
    """Removes abandoned partial uploads from a target directory.

    Matches ``*.part`` entries directly under the directory, which covers both
    append-mode temp files and ``.dir.part`` chunk directories. Deletion is
    best-effort: a failure is logged and the sweep moves on.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock

    def sweep(self, target_dir: Path, max_age: timedelta) -> list[Path]:
        target_dir = Path(target_dir)
        if not target_dir.is_dir():
            return []

        now = self.clock()
        max_age_seconds = max_age.total_seconds()
        removed: list[Path] = []

        for entry in sorted(target_dir.glob(f"*{PART_SUFFIX}")):
            try:
                age = now - entry.stat().st_mtime
            except OSError:
                # Committed or swept by a concurrent request
                continue
            if age < max_age_seconds:
                continue
            if self._remove(entry):
                removed.append(entry)

        if removed:
            logger.info("stale_partials_removed", target_dir=str(target_dir), count=len(removed))
        return removed

    @staticmethod
    def _remove(entry: Path) -> bool:
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            logger.warning("stale_partial_removal_failed", path=str(entry), error=str(e))
            return False
        logger.debug("stale_partial_removed", path=str(entry))
        return True

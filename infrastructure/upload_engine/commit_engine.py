from __future__ import annotations

import os
from contextlib import suppress
from typing import TYPE_CHECKING

import structlog

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind
from domain.value_objects.upload_result import UploadResult
from infrastructure.policies.stat_file_size_probe import StatFileSizeProbe

if TYPE_CHECKING:
    from pathlib import Path

    from application.dtos.upload_dtos import UploadConfiguration
    from application.ports.upload_policies import FileSizeProbe
    from domain.value_objects.upload_paths import UploadPaths

logger = structlog.get_logger()


class AtomicCommitEngine:
    """Promotes a finished temp artifact to its final path.

    The final path is only ever produced by ``os.replace``, so readers see
    either nothing or the complete, validated file.
    """

    def __init__(self, size_probe: FileSizeProbe | None = None) -> None:
        self.size_probe = size_probe or StatFileSizeProbe()

    def commit(self, tmp_path: Path, paths: UploadPaths, config: UploadConfiguration) -> UploadResult:
        if not tmp_path.is_file():
            raise UploadError(UploadErrorKind.MOVE, f"{tmp_path.name} is missing")

        if config.file_checker is not None and not self._passes_check(tmp_path, config):
            logger.warning("upload_rejected_by_check", path=str(tmp_path), name=paths.name)
            if config.cleanup:
                with suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise UploadError(UploadErrorKind.SECURITY, paths.name)

        try:
            os.replace(tmp_path, paths.target_path)
        except OSError as e:
            raise UploadError(UploadErrorKind.MOVE, str(e)) from e

        size = (config.file_size_probe or self.size_probe).size(paths.target_path)
        logger.info("upload_committed", path=str(paths.target_path), size=size)
        return UploadResult(name=paths.name, path=str(paths.target_path), size=size)

    @staticmethod
    def _passes_check(tmp_path: Path, config: UploadConfiguration) -> bool:
        # A checker that cannot decide rejects the file
        try:
            return bool(config.file_checker.check(tmp_path))
        except Exception:
            logger.exception("file_check_failed", path=str(tmp_path))
            return False

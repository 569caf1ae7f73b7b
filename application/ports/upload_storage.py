"""Ports of the chunk assembly and atomic commit engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from datetime import timedelta
    from pathlib import Path

    from application.dtos.upload_dtos import UploadConfiguration
    from application.ports.upload_source import UploadSource
    from domain.value_objects.upload_paths import UploadPaths
    from domain.value_objects.upload_result import UploadResult


class StreamWriter(Protocol):
    def write_upload_to(self, dest: Path, source: UploadSource, *, append: bool = False) -> Path:
        """Stream the upload payload into ``dest``, creating parent directories."""
        ...


class ChunkAssembler(Protocol):
    def combine_chunks(
        self,
        chunk_dir: Path,
        dest: Path,
        chunks: int,
        *,
        cleanup: bool = True,
    ) -> Path: ...


class CommitEngine(Protocol):
    def commit(self, tmp_path: Path, paths: UploadPaths, config: UploadConfiguration) -> UploadResult:
        """Validate ``tmp_path`` and atomically promote it to the final path."""
        ...


class ChunkStore(Protocol):
    def handle_chunk(
        self,
        source: UploadSource,
        paths: UploadPaths,
        config: UploadConfiguration,
    ) -> UploadResult: ...


class PartialUploadJanitor(Protocol):
    def sweep(self, target_dir: Path, max_age: timedelta) -> list[Path]:
        """Remove partial artifacts older than ``max_age`` and return what was removed."""
        ...


class UploadLocks(Protocol):
    def hold(self, key: str) -> AbstractContextManager[None]:
        """Serialize work on one upload, keyed by its target path."""
        ...

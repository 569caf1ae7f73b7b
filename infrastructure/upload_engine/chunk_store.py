from __future__ import annotations

import os
from contextlib import suppress
from typing import TYPE_CHECKING

import structlog

from domain.exceptions import UploadError
from domain.value_objects.upload_paths import PART_SUFFIX
from domain.value_objects.upload_result import UploadResult
from infrastructure.policies.stat_file_size_probe import StatFileSizeProbe

if TYPE_CHECKING:
    from pathlib import Path

    from application.dtos.upload_dtos import UploadConfiguration
    from application.ports.upload_policies import FileSizeProbe
    from application.ports.upload_source import UploadSource
    from application.ports.upload_storage import ChunkAssembler, CommitEngine, StreamWriter
    from domain.value_objects.upload_paths import UploadPaths

logger = structlog.get_logger()


class FilesystemChunkStore:
    """Accumulates the chunks of an upload on disk and commits the last one.

    Append mode grows a single ``<target>.part`` and needs chunks in order,
    exactly once. Side-directory mode keeps one ``<i>.part`` file per index in
    ``<target>.dir.part`` and tolerates out-of-order and resent chunks, at the
    cost of one extra copy when the chunks are combined.
    """

    def __init__(
        self,
        stream_writer: StreamWriter,
        assembler: ChunkAssembler,
        commit_engine: CommitEngine,
        size_probe: FileSizeProbe | None = None,
    ) -> None:
        self.stream_writer = stream_writer
        self.assembler = assembler
        self.commit_engine = commit_engine
        self.size_probe = size_probe or StatFileSizeProbe()

    def handle_chunk(
        self,
        source: UploadSource,
        paths: UploadPaths,
        config: UploadConfiguration,
    ) -> UploadResult:
        if config.append_chunks_to_target:
            return self._append_chunk(source, paths, config)
        return self._store_chunk_file(source, paths, config)

    def _append_chunk(
        self,
        source: UploadSource,
        paths: UploadPaths,
        config: UploadConfiguration,
    ) -> UploadResult:
        # The first chunk truncates so a restarted upload does not inherit stale bytes
        append = config.chunk > 0
        committed_size = self._existing_size(paths.part_path) if append else 0
        try:
            self.stream_writer.write_upload_to(paths.part_path, source, append=append)
        except UploadError:
            # Drop the bytes of the failed chunk so a resend appends at the right offset
            if append:
                with suppress(OSError):
                    os.truncate(paths.part_path, committed_size)
            else:
                self._discard(paths.part_path)
            raise
        logger.debug("chunk_appended", path=str(paths.part_path), chunk=config.chunk, chunks=config.chunks)

        if config.is_last_chunk_index:
            return self.commit_engine.commit(paths.part_path, paths, config)

        return self._progress(paths, config, self._probe(config).size(paths.part_path))

    def _store_chunk_file(
        self,
        source: UploadSource,
        paths: UploadPaths,
        config: UploadConfiguration,
    ) -> UploadResult:
        chunk_path = paths.chunk_path(config.chunk)
        try:
            self.stream_writer.write_upload_to(chunk_path, source)
        except UploadError:
            # A truncated chunk file would otherwise count as received
            self._discard(chunk_path)
            raise
        stored = self.stored_chunks(paths.chunk_dir, config.chunks)
        logger.debug("chunk_stored", chunk_dir=str(paths.chunk_dir), chunk=config.chunk, stored=len(stored))

        if len(stored) == config.chunks and config.combine_on_complete:
            self.assembler.combine_chunks(
                paths.chunk_dir,
                paths.part_path,
                config.chunks,
                cleanup=config.cleanup,
            )
            return self.commit_engine.commit(paths.part_path, paths, config)

        probe = self._probe(config)
        return self._progress(paths, config, sum(probe.size(path) for path in stored))

    @staticmethod
    def stored_chunks(chunk_dir: Path, chunks: int | None = None) -> list[Path]:
        """List chunk files present in ``chunk_dir``, whatever order they arrived in.

        With ``chunks`` set, files left by an earlier attempt with a larger
        chunk count are not listed.
        """
        if not chunk_dir.is_dir():
            return []
        stored = []
        for path in chunk_dir.glob(f"*{PART_SUFFIX}"):
            index = path.name.removesuffix(PART_SUFFIX)
            if not index.isdigit() or not path.is_file():
                continue
            if chunks is None or int(index) < chunks:
                stored.append(path)
        return sorted(stored, key=lambda path: int(path.name.removesuffix(PART_SUFFIX)))

    @staticmethod
    def _existing_size(path: Path) -> int:
        try:
            return path.stat().st_size
        except FileNotFoundError:
            return 0

    @staticmethod
    def _discard(path: Path) -> None:
        with suppress(OSError):
            path.unlink(missing_ok=True)

    def _probe(self, config: UploadConfiguration) -> FileSizeProbe:
        return config.file_size_probe or self.size_probe

    @staticmethod
    def _progress(paths: UploadPaths, config: UploadConfiguration, size: int) -> UploadResult:
        return UploadResult(
            name=paths.name,
            path=str(paths.target_path),
            size=size,
            chunk=config.chunk,
        )

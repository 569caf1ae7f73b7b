import time
from contextlib import nullcontext, suppress
from pathlib import Path

import pydantic
import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.upload_dtos import UploadConfiguration, UploadParams
from application.ports.upload_source import UploadSource
from application.ports.upload_storage import (
    ChunkStore,
    CommitEngine,
    PartialUploadJanitor,
    StreamWriter,
    UploadLocks,
)
from domain.exceptions import UploadError
from domain.services.file_name_service import FileNameService
from domain.value_objects.upload_error_kind import UploadErrorKind
from domain.value_objects.upload_paths import UploadPaths
from domain.value_objects.upload_result import UploadResult

logger = structlog.get_logger()


def _parse_count(value: str | None, field: str) -> int:
    if value is None or not value.strip():
        return 0
    try:
        return int(value)
    except ValueError:
        raise UploadError(UploadErrorKind.INPUT, f"{field} must be an integer") from None


class HandleUploadUseCase:
    """Accept a whole file or one chunk of it and commit it once complete.

    A request without ``chunks`` is a single-shot upload: the payload is written
    to ``<target>.part`` and committed right away. Chunked requests are handed to
    the chunk store, which commits when it sees the last chunk.
    """

    def __init__(
        self,
        configuration: UploadConfiguration,
        stream_writer: StreamWriter,
        chunk_store: ChunkStore,
        commit_engine: CommitEngine,
        janitor: PartialUploadJanitor,
        locks: UploadLocks | None = None,
    ) -> None:
        self.configuration = configuration
        self.stream_writer = stream_writer
        self.chunk_store = chunk_store
        self.commit_engine = commit_engine
        self.janitor = janitor
        self.locks = locks

    def configure(self, params: UploadParams) -> UploadConfiguration:
        """Derive the per-request configuration, failing fast on garbled parameters.

        Raises:
            UploadError: INPUT when ``chunk``/``chunks`` are not valid indices

        """
        chunk = _parse_count(params.chunk, "chunk")
        chunks = _parse_count(params.chunks, "chunks")
        try:
            return self.configuration.with_request(file_name=params.name, chunk=chunk, chunks=chunks)
        except pydantic.ValidationError as e:
            raise UploadError(UploadErrorKind.INPUT, f"invalid chunk parameters: {e.error_count()} errors") from e

    def execute(self, source: UploadSource, params: UploadParams) -> Result[UploadResult, AppError]:
        try:
            config = self.configure(params)

            if config.cleanup:
                self.janitor.sweep(config.target_dir, config.max_file_age)

            if config.delay:
                time.sleep(config.delay)

            target_path = FileNameService.resolve_target_path(
                config.file_name,
                config.target_dir,
                fallback_name=source.declared_name,
                sanitize=config.name_sanitizer.sanitize if config.name_sanitizer else None,
                allowed_extensions=config.allowed_extensions,
            )
            paths = UploadPaths(target_path=target_path)

            lock = self.locks.hold(str(paths.target_path)) if self.locks else nullcontext()
            with lock:
                if config.is_chunked:
                    result = self.chunk_store.handle_chunk(source, paths, config)
                else:
                    result = self._handle_single(source, paths, config)

            logger.info(
                "upload_handled",
                name=result.name,
                size=result.size,
                chunk=config.chunk if config.is_chunked else None,
                chunks=config.chunks,
                complete=result.is_complete,
            )
            return Success(result)
        except UploadError as e:
            logger.warning("upload_failed", code=e.code, error=str(e))
            return Failure(AppError.from_upload_error(e))
        except Exception as e:
            logger.exception("upload_failed_unexpectedly", error=str(e))
            return Failure(AppError.from_upload_error(UploadError(UploadErrorKind.UNKNOWN)))

    def _handle_single(
        self,
        source: UploadSource,
        paths: UploadPaths,
        config: UploadConfiguration,
    ) -> UploadResult:
        try:
            self.stream_writer.write_upload_to(paths.part_path, source)
        except UploadError:
            if config.cleanup:
                with suppress(OSError):
                    paths.part_path.unlink(missing_ok=True)
            raise
        return self.commit_engine.commit(paths.part_path, paths, config)


class SweepPartialUploadsUseCase:
    """Run the stale-partial sweep on its own, outside of an upload request."""

    def __init__(self, configuration: UploadConfiguration, janitor: PartialUploadJanitor) -> None:
        self.configuration = configuration
        self.janitor = janitor

    def execute(self, target_dir: Path | None = None) -> Result[list[Path], AppError]:
        removed = self.janitor.sweep(
            target_dir or self.configuration.target_dir,
            self.configuration.max_file_age,
        )
        return Success(removed)

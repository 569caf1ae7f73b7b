from __future__ import annotations

import shutil
from contextlib import suppress
from pathlib import Path
from typing import BinaryIO

import structlog

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind
from domain.value_objects.upload_paths import PART_SUFFIX
from infrastructure.upload_engine.stream_writer import close_quietly, copy_blocks

logger = structlog.get_logger()


class FilesystemChunkAssembler:
    """Concatenates side-directory chunk files into one temp file."""

    def combine_chunks(
        self,
        chunk_dir: Path,
        dest: Path,
        chunks: int,
        *,
        cleanup: bool = True,
    ) -> Path:
        """Concatenate ``<chunk_dir>/<i>.part`` for i in 0..chunks-1 into ``dest``.

        Chunks are read in numeric index order, never in directory listing
        order. Every chunk must be present before the first byte is written,
        so a missing chunk leaves the others in place for a resend.

        Raises:
            UploadError: MOVE for a missing chunk, OUTPUT when ``dest`` cannot be
                opened, INPUT when a chunk cannot be read

        """
        chunk_paths = [Path(chunk_dir) / f"{index}{PART_SUFFIX}" for index in range(chunks)]
        missing = [path.name for path in chunk_paths if not path.is_file()]
        if missing:
            raise UploadError(UploadErrorKind.MOVE, f"missing chunks {', '.join(missing)}")

        try:
            out = Path(dest).open("wb")
        except OSError as e:
            raise UploadError(UploadErrorKind.OUTPUT, str(dest)) from e

        try:
            for chunk_path in chunk_paths:
                self._append_chunk(chunk_path, out)
                if cleanup:
                    with suppress(OSError):
                        chunk_path.unlink()
        except UploadError:
            close_quietly(out)
            with suppress(OSError):
                Path(dest).unlink(missing_ok=True)
            raise
        close_quietly(out)

        if cleanup:
            shutil.rmtree(chunk_dir, ignore_errors=True)

        logger.info("chunks_combined", chunk_dir=str(chunk_dir), dest=str(dest), chunks=chunks)
        return Path(dest)

    @staticmethod
    def _append_chunk(chunk_path: Path, out: BinaryIO) -> None:
        try:
            src = chunk_path.open("rb")
        except FileNotFoundError as e:
            raise UploadError(UploadErrorKind.MOVE, chunk_path.name) from e
        except OSError as e:
            raise UploadError(UploadErrorKind.INPUT, chunk_path.name) from e
        try:
            copy_blocks(src, out)
        finally:
            close_quietly(src)

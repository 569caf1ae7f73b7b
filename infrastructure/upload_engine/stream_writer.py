from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import structlog

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind

if TYPE_CHECKING:
    from application.ports.upload_source import UploadSource

logger = structlog.get_logger()

BLOCK_SIZE = 4096


def copy_blocks(src: BinaryIO, dst: BinaryIO, block_size: int = BLOCK_SIZE) -> int:
    """Copy ``src`` into ``dst`` in fixed-size blocks until ``src`` is exhausted.

    Memory use is bounded by ``block_size`` whatever the payload size.
    Returns the number of bytes copied.
    """
    copied = 0
    while True:
        try:
            block = src.read(block_size)
        except OSError as e:
            raise UploadError(UploadErrorKind.INPUT, f"read failed after {copied} bytes") from e
        if not block:
            return copied
        try:
            dst.write(block)
        except OSError as e:
            raise UploadError(UploadErrorKind.OUTPUT, f"write failed after {copied} bytes") from e
        copied += len(block)


def close_quietly(*handles: BinaryIO) -> None:
    """Close every handle, ignoring close-time errors."""
    for handle in handles:
        try:
            handle.close()
        except OSError as e:
            logger.debug("handle_close_failed", error=str(e))


class FilesystemStreamWriter:
    """Writes an upload payload to a local file."""

    def write_upload_to(self, dest: Path, source: UploadSource, *, append: bool = False) -> Path:
        """Stream the payload of ``source`` into ``dest``.

        Args:
            dest: File to write, its parent directories are created on demand
            source: Multipart field or raw request body
            append: Append to ``dest`` instead of truncating it

        Raises:
            UploadError: TEMP_DIR, INPUT or OUTPUT depending on the failing step

        """
        dest = Path(dest)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise UploadError(UploadErrorKind.TEMP_DIR, str(dest.parent)) from e

        try:
            src = source.open()
        except OSError as e:
            raise UploadError(UploadErrorKind.INPUT, str(e)) from e

        try:
            out = dest.open("ab" if append else "wb")
        except OSError as e:
            close_quietly(src)
            raise UploadError(UploadErrorKind.OUTPUT, str(dest)) from e

        try:
            written = copy_blocks(src, out)
        finally:
            close_quietly(out, src)

        logger.debug("upload_stream_written", path=str(dest), bytes=written, append=append)
        return dest

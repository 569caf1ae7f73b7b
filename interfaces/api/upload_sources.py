"""Adapters turning an incoming HTTP request into an upload source."""

from __future__ import annotations

import tempfile
from typing import TYPE_CHECKING, BinaryIO

from starlette.datastructures import UploadFile
from starlette.requests import ClientDisconnect

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import Request

# Raw bodies stay in memory up to this size, then roll over to tmp_dir
SPOOL_MAX_MEMORY = 1024 * 1024


class UploadFileSource:
    """Payload held by a starlette ``UploadFile``.

    ``value`` is whatever the request carried under the payload field: an
    ``UploadFile`` for a genuine upload, a plain string for an ordinary form
    field, or ``None`` when the field is absent.
    """

    def __init__(self, value: UploadFile | str | None, field_name: str) -> None:
        self.value = value
        self.field_name = field_name

    @property
    def declared_name(self) -> str | None:
        if isinstance(self.value, UploadFile):
            return self.value.filename
        return None

    def open(self) -> BinaryIO:
        if self.value is None:
            raise UploadError(UploadErrorKind.INPUT, f"missing field {self.field_name!r}")
        if not isinstance(self.value, UploadFile):
            raise UploadError(UploadErrorKind.INPUT, f"field {self.field_name!r} is not a file upload")
        self.value.file.seek(0)
        return self.value.file


async def spool_request_body(request: Request, tmp_dir: Path) -> UploadFile:
    """Stream a raw request body into a spooled temp file under ``tmp_dir``.

    Raises:
        UploadError: TEMP_DIR when ``tmp_dir`` cannot be created, INPUT when
            the client disconnects mid-body

    """
    try:
        tmp_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise UploadError(UploadErrorKind.TEMP_DIR, str(tmp_dir)) from e

    upload = UploadFile(
        file=tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY, dir=tmp_dir),  # noqa: SIM115
        headers=request.headers,
    )
    try:
        async for block in request.stream():
            await upload.write(block)
    except ClientDisconnect as e:
        await upload.close()
        raise UploadError(UploadErrorKind.INPUT, "client disconnected") from e
    except OSError as e:
        await upload.close()
        raise UploadError(UploadErrorKind.TEMP_DIR, str(e)) from e
    return upload

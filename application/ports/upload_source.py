from __future__ import annotations

from typing import BinaryIO, Protocol


class UploadSource(Protocol):
    """Where the bytes of one request come from.

    Either a named field of a multipart body or the raw request body.
    """

    @property
    def declared_name(self) -> str | None:
        """File name announced by the transport, if any."""
        ...

    def open(self) -> BinaryIO:
        """Open the payload for reading.

        Raises:
            UploadError: INPUT when the payload is missing, errored, or not a genuine upload

        """
        ...

"""Domain exceptions for business rule violations."""

from __future__ import annotations

from domain.value_objects.upload_error_kind import UploadErrorKind


class DomainError(Exception):
    """Base exception for domain layer."""


class UploadError(DomainError):
    """Raised when an upload step fails.

    Carries the error kind so callers can report a stable numeric code
    alongside the human-readable message.
    """

    def __init__(self, kind: UploadErrorKind | int, detail: str | None = None) -> None:
        self.kind = UploadErrorKind.from_code(kind)
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message} ({detail})")

    @property
    def code(self) -> int:
        return int(self.kind)

    @property
    def message(self) -> str:
        return self.kind.message

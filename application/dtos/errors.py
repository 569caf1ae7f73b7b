from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.exceptions import UploadError


class AppError:
    """Represents different categories of application errors."""

    def __init__(self, category: str, message: str, code: int | None = None) -> None:
        self.category = category  # 'upload' carries a numeric code
        self.message = message
        self.code = code

    @classmethod
    def from_upload_error(cls, error: UploadError) -> AppError:
        return cls("upload", error.message, code=error.code)

    def __str__(self) -> str:
        return self.message

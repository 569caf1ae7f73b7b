"""Domain layer exports."""

from domain.exceptions import DomainError, UploadError
from domain.services.file_name_service import FileNameService
from domain.value_objects import (
    UploadErrorKind,
    UploadPaths,
    UploadResult,
)

__all__ = [
    "DomainError",
    "FileNameService",
    "UploadError",
    "UploadErrorKind",
    "UploadPaths",
    "UploadResult",
]

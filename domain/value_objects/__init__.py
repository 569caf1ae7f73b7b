from .upload_error_kind import UploadErrorKind
from .upload_paths import CHUNK_DIR_SUFFIX, PART_SUFFIX, UploadPaths
from .upload_result import UploadResult

__all__ = [
    "CHUNK_DIR_SUFFIX",
    "PART_SUFFIX",
    "UploadErrorKind",
    "UploadPaths",
    "UploadResult",
]

from enum import IntEnum


class UploadErrorKind(IntEnum):
    """Failure categories of an upload, keyed by their wire error code."""

    TEMP_DIR = 100
    INPUT = 101
    OUTPUT = 102
    MOVE = 103
    TYPE = 104
    SECURITY = 105
    UNKNOWN = 111

    @classmethod
    def from_code(cls, code: int) -> "UploadErrorKind":
        """Resolve a numeric code, falling back to UNKNOWN for codes outside the taxonomy."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    UploadErrorKind.TEMP_DIR: "Failed to open temp directory.",
    UploadErrorKind.INPUT: "Failed to open input stream.",
    UploadErrorKind.OUTPUT: "Failed to open output stream.",
    UploadErrorKind.MOVE: "Failed to move uploaded file.",
    UploadErrorKind.TYPE: "File type not allowed.",
    UploadErrorKind.SECURITY: "File didn't pass security check.",
    UploadErrorKind.UNKNOWN: "Failed due to unknown error.",
}

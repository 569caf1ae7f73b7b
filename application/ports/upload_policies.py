"""Caller-replaceable policies consulted by the upload engine."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileNameSanitizer(Protocol):
    def sanitize(self, file_name: str) -> str: ...


@runtime_checkable
class FileChecker(Protocol):
    def check(self, path: Path) -> bool:
        """Return False to reject the fully assembled file before it is committed."""
        ...


@runtime_checkable
class FileSizeProbe(Protocol):
    def size(self, path: Path) -> int:
        """Return the size of ``path`` in bytes, correct beyond 2 GiB."""
        ...

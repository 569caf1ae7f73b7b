"""Domain service for turning client-supplied names into safe target paths."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind

SPECIAL_CHARS = (
    "?", "[", "]", "/", "\\", "=", "<", ">", ":", ";", ",", "'", '"', "&",
    "$", "#", "*", "(", ")", "|", "~", "`", "!", "{", "}",
)  # fmt: skip

_SPECIAL_CHARS_RE = re.compile("|".join(re.escape(char) for char in SPECIAL_CHARS))
_DASH_RUN_RE = re.compile(r"[\s-]+")
_EXTENSION_SPLIT_RE = re.compile(r"\s*,\s*")


class FileNameService:
    """Naming rules applied before any byte of an upload is written."""

    @staticmethod
    def sanitize(file_name: str) -> str:
        """Sanitize a filename replacing whitespace with dashes.

        Removes characters that are illegal in filenames on some operating
        systems or need escaping on the command line, collapses whitespace and
        dash runs into a single dash and trims periods, dashes and underscores
        from both ends.
        """
        file_name = _SPECIAL_CHARS_RE.sub("", file_name)
        file_name = _DASH_RUN_RE.sub("-", file_name)
        return file_name.strip(".-_")

    @staticmethod
    def parse_extensions(extensions: str | Iterable[str] | None) -> frozenset[str] | None:
        """Normalize an allow-list given as a set or as a comma separated string."""
        if extensions is None:
            return None
        if isinstance(extensions, str):
            extensions = _EXTENSION_SPLIT_RE.split(extensions.strip())
        parsed = frozenset(ext.strip().lstrip(".").lower() for ext in extensions if ext.strip())
        return parsed or None

    @staticmethod
    def extension_of(file_name: str) -> str:
        return Path(file_name).suffix[1:].lower()

    @classmethod
    def ensure_extension_allowed(cls, file_name: str, allowed: frozenset[str] | None) -> None:
        if allowed and cls.extension_of(file_name) not in allowed:
            raise UploadError(UploadErrorKind.TYPE, file_name)

    @classmethod
    def resolve_target_path(
        cls,
        raw_name: str | None,
        target_dir: Path,
        *,
        fallback_name: str | None = None,
        sanitize: Callable[[str], str] | None = None,
        allowed_extensions: frozenset[str] | None = None,
    ) -> Path:
        """Resolve the absolute target path for an upload.

        Args:
            raw_name: Name sent by the client, before sanitization
            target_dir: Directory the committed file lands in
            fallback_name: Name declared by the upload itself, used when ``raw_name`` is empty
            sanitize: Naming policy, defaults to :meth:`sanitize`
            allowed_extensions: Lower-cased extension allow-list, ``None`` allows any

        Raises:
            UploadError: INPUT when no usable name remains, TYPE when the
                extension is not allowed

        """
        name = raw_name or fallback_name
        if not name:
            raise UploadError(UploadErrorKind.INPUT, "missing file name")

        file_name = (sanitize or cls.sanitize)(name)
        # A custom policy must still produce a bare name inside target_dir
        if not file_name or Path(file_name).name != file_name or file_name in {".", ".."}:
            raise UploadError(UploadErrorKind.INPUT, f"unusable file name {name!r}")

        cls.ensure_extension_allowed(file_name, allowed_extensions)
        return Path(target_dir).resolve() / file_name

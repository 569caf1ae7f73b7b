from pathlib import Path

import structlog

from domain.value_objects.upload_paths import PART_SUFFIX

logger = structlog.get_logger()

DEFAULT_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "jpg": (b"\xff\xd8\xff",),
    "jpeg": (b"\xff\xd8\xff",),
    "png": (b"\x89PNG\r\n\x1a\n",),
    "gif": (b"GIF87a", b"GIF89a"),
    "pdf": (b"%PDF-",),
    "zip": (b"PK\x03\x04", b"PK\x05\x06"),
    "gz": (b"\x1f\x8b",),
}


class SignatureFileChecker:
    """Rejects files whose leading bytes contradict their extension.

    Extensions without a known signature pass unchecked. The extension is
    taken from the name being committed, so ``photo.png.part`` is checked as
    a PNG.
    """

    def __init__(self, signatures: dict[str, tuple[bytes, ...]] | None = None) -> None:
        self.signatures = DEFAULT_SIGNATURES if signatures is None else signatures
        self.header_size = max((len(sig) for sigs in self.signatures.values() for sig in sigs), default=0)

    def check(self, path: Path) -> bool:
        name = path.name.removesuffix(PART_SUFFIX)
        expected = self.signatures.get(Path(name).suffix[1:].lower())
        if not expected:
            return True

        with path.open("rb") as f:
            header = f.read(self.header_size)

        if header.startswith(expected):
            return True
        logger.warning("file_signature_mismatch", name=name, header=header[:8].hex())
        return False

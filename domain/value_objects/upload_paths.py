from pathlib import Path

from pydantic import BaseModel, ConfigDict

PART_SUFFIX = ".part"
CHUNK_DIR_SUFFIX = ".dir.part"


class UploadPaths(BaseModel):
    """On-disk layout of one upload.

    ``<target>`` is the committed file, ``<target>.part`` the single-shot or
    append-mode temp file, ``<target>.dir.part/<i>.part`` the side-directory
    chunk files. Partial state left by another instance is readable as long
    as this layout is kept.
    """

    model_config = ConfigDict(frozen=True)

    target_path: Path

    @property
    def name(self) -> str:
        return self.target_path.name

    @property
    def part_path(self) -> Path:
        return self.target_path.with_name(self.target_path.name + PART_SUFFIX)

    @property
    def chunk_dir(self) -> Path:
        return self.target_path.with_name(self.target_path.name + CHUNK_DIR_SUFFIX)

    def chunk_path(self, index: int) -> Path:
        return self.chunk_dir / f"{index}{PART_SUFFIX}"

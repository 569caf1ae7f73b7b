"""Tests for side-directory chunk assembly."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.exceptions import UploadError
from domain.value_objects.upload_error_kind import UploadErrorKind
from infrastructure.upload_engine.chunk_assembler import FilesystemChunkAssembler


@pytest.fixture
def chunk_dir(tmp_path: Path) -> Path:
    path = tmp_path / "movie.mp4.dir.part"
    path.mkdir()
    return path


def _write_chunks(chunk_dir: Path, count: int) -> bytes:
    expected = b""
    for index in range(count):
        data = f"<{index}>".encode() * (index + 1)
        (chunk_dir / f"{index}.part").write_bytes(data)
        expected += data
    return expected


class TestFilesystemChunkAssembler:
    def test_combines_in_numeric_order(self, tmp_path: Path, chunk_dir: Path) -> None:
        # 10.part sorts before 2.part lexically
        expected = _write_chunks(chunk_dir, 12)
        dest = tmp_path / "movie.mp4.part"

        FilesystemChunkAssembler().combine_chunks(chunk_dir, dest, 12)

        assert dest.read_bytes() == expected
        assert not chunk_dir.exists()

    def test_keeps_chunks_without_cleanup(self, tmp_path: Path, chunk_dir: Path) -> None:
        expected = _write_chunks(chunk_dir, 3)
        dest = tmp_path / "movie.mp4.part"

        FilesystemChunkAssembler().combine_chunks(chunk_dir, dest, 3, cleanup=False)

        assert dest.read_bytes() == expected
        assert sorted(p.name for p in chunk_dir.iterdir()) == ["0.part", "1.part", "2.part"]

    def test_missing_chunk_is_move_error(self, tmp_path: Path, chunk_dir: Path) -> None:
        _write_chunks(chunk_dir, 3)
        (chunk_dir / "1.part").unlink()
        dest = tmp_path / "movie.mp4.part"

        with pytest.raises(UploadError) as exc_info:
            FilesystemChunkAssembler().combine_chunks(chunk_dir, dest, 3)

        assert exc_info.value.kind == UploadErrorKind.MOVE
        assert not dest.exists()
        assert (chunk_dir / "0.part").exists()
        assert (chunk_dir / "2.part").exists()

    def test_unopenable_destination_is_output_error(self, tmp_path: Path, chunk_dir: Path) -> None:
        _write_chunks(chunk_dir, 2)
        dest = tmp_path / "movie.mp4.part"
        dest.mkdir()

        with pytest.raises(UploadError) as exc_info:
            FilesystemChunkAssembler().combine_chunks(chunk_dir, dest, 2)

        assert exc_info.value.kind == UploadErrorKind.OUTPUT
        assert (chunk_dir / "0.part").exists()

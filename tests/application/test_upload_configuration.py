"""Tests for UploadConfiguration."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pydantic
import pytest

from application.dtos.upload_dtos import UploadConfiguration, UploadResponse
from domain.value_objects.upload_result import UploadResult
from tests.mocks import StaticFileChecker


class TestUploadConfiguration:
    def test_defaults(self, tmp_path: Path) -> None:
        config = UploadConfiguration(target_dir=tmp_path)

        assert config.file_data_name == "file"
        assert config.chunks == 0
        assert not config.is_chunked
        assert config.cleanup
        assert config.append_chunks_to_target
        assert config.max_file_age == timedelta(hours=5)
        assert config.allowed_extensions is None

    def test_unknown_option_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(pydantic.ValidationError):
            UploadConfiguration(target_dir=tmp_path, chunk_size=1024)

    def test_is_immutable(self, tmp_path: Path) -> None:
        config = UploadConfiguration(target_dir=tmp_path)

        with pytest.raises(pydantic.ValidationError):
            config.chunk = 3

    @pytest.mark.parametrize(("chunk", "chunks"), [(3, 3), (5, 2), (-1, 0), (0, -1)])
    def test_chunk_index_must_be_in_range(self, tmp_path: Path, chunk: int, chunks: int) -> None:
        with pytest.raises(pydantic.ValidationError):
            UploadConfiguration(target_dir=tmp_path, chunk=chunk, chunks=chunks)

    def test_last_chunk_index(self, tmp_path: Path) -> None:
        assert UploadConfiguration(target_dir=tmp_path, chunk=2, chunks=3).is_last_chunk_index
        assert not UploadConfiguration(target_dir=tmp_path, chunk=1, chunks=3).is_last_chunk_index
        assert not UploadConfiguration(target_dir=tmp_path).is_last_chunk_index

    def test_allowed_extensions_from_string(self, tmp_path: Path) -> None:
        config = UploadConfiguration(target_dir=tmp_path, allowed_extensions="JPG, png")

        assert config.allowed_extensions == frozenset({"jpg", "png"})

    def test_hooks_must_implement_their_policy(self, tmp_path: Path) -> None:
        with pytest.raises(pydantic.ValidationError):
            UploadConfiguration(target_dir=tmp_path, file_checker=object())

    def test_with_request_keeps_hooks_and_revalidates(self, tmp_path: Path) -> None:
        checker = StaticFileChecker(verdict=True)
        base = UploadConfiguration(target_dir=tmp_path, file_checker=checker, cleanup=False)

        derived = base.with_request(file_name="a.txt", chunk=1, chunks=4)

        assert derived.file_checker is checker
        assert derived.cleanup is False
        assert (derived.file_name, derived.chunk, derived.chunks) == ("a.txt", 1, 4)
        assert base.file_name is None

        with pytest.raises(pydantic.ValidationError):
            base.with_request(file_name="a.txt", chunk=4, chunks=4)


class TestUploadResponse:
    def test_envelope_uses_client_field_names(self) -> None:
        response = UploadResponse(info=UploadResult(name="a.txt", path="/srv/a.txt", size=3))

        assert response.model_dump(by_alias=True, exclude_none=True) == {
            "OK": 1,
            "info": {"name": "a.txt", "path": "/srv/a.txt", "size": 3},
        }

"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from application.dtos.upload_dtos import UploadConfiguration
from domain.value_objects.upload_paths import UploadPaths


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Return an existing, resolved upload directory."""
    path = (tmp_path / "uploads").resolve()
    path.mkdir()
    return path


@pytest.fixture
def base_configuration(target_dir: Path, tmp_path: Path) -> UploadConfiguration:
    """Return the base configuration requests derive from."""
    return UploadConfiguration(target_dir=target_dir, tmp_dir=tmp_path / "spool")


@pytest.fixture
def upload_paths(target_dir: Path) -> UploadPaths:
    return UploadPaths(target_path=target_dir / "report.pdf")


@pytest.fixture
def sample_content() -> bytes:
    """Return a payload spanning several copy blocks."""
    return bytes(range(256)) * 70

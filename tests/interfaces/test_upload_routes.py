"""Tests for the upload HTTP endpoint."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from infrastructure.config import Settings
from infrastructure.di.container import create_container
from interfaces.api.main import app
from interfaces.dependencies import get_container


@pytest.fixture
def client(target_dir: Path, tmp_path: Path) -> Iterator[TestClient]:
    app_settings = Settings(
        UPLOAD_TARGET_DIR=str(target_dir),
        UPLOAD_TMP_DIR=str(tmp_path / "spool"),
        UPLOAD_ALLOWED_EXTENSIONS="jpg,jpeg,png,txt,bin",
    )
    container = create_container(app_settings)
    app.dependency_overrides[get_container] = lambda: container
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestUploadEndpoint:
    def test_multipart_upload(self, client: TestClient, target_dir: Path) -> None:
        response = client.post(
            "/upload",
            data={"name": "my notes.txt"},
            files={"file": ("ignored.txt", b"hello world", "text/plain")},
        )

        assert response.status_code == 200
        assert response.json() == {
            "OK": 1,
            "info": {"name": "my-notes.txt", "path": str(target_dir / "my-notes.txt"), "size": 11},
        }
        assert (target_dir / "my-notes.txt").read_bytes() == b"hello world"

    def test_multipart_name_falls_back_to_filename(self, client: TestClient, target_dir: Path) -> None:
        response = client.post("/upload", files={"file": ("photo.png", b"\x89PNG", "image/png")})

        assert response.status_code == 200
        assert response.json()["info"]["name"] == "photo.png"
        assert (target_dir / "photo.png").exists()

    def test_form_fields_override_query_string(self, client: TestClient, target_dir: Path) -> None:
        response = client.post(
            "/upload?name=query.txt",
            data={"name": "form.txt"},
            files={"file": ("x.txt", b"x", "text/plain")},
        )

        assert response.json()["info"]["name"] == "form.txt"
        assert not (target_dir / "query.txt").exists()

    def test_raw_body_chunks(self, client: TestClient, target_dir: Path) -> None:
        headers = {"content-type": "application/octet-stream"}

        first = client.post("/upload?name=blob.bin&chunk=0&chunks=2", content=b"abc", headers=headers)

        assert first.status_code == 200
        assert first.json()["info"] == {
            "name": "blob.bin",
            "path": str(target_dir / "blob.bin"),
            "size": 3,
            "chunk": 0,
        }

        last = client.post("/upload?name=blob.bin&chunk=1&chunks=2", content=b"def", headers=headers)

        assert last.status_code == 200
        assert "chunk" not in last.json()["info"]
        assert (target_dir / "blob.bin").read_bytes() == b"abcdef"

    def test_disallowed_type(self, client: TestClient, target_dir: Path) -> None:
        response = client.post("/upload", files={"file": ("photo.GIF", b"GIF89a", "image/gif")})

        assert response.status_code == 415
        assert response.json() == {"OK": 0, "error": {"code": 104, "message": "File type not allowed."}}
        assert list(target_dir.iterdir()) == []

    def test_missing_name(self, client: TestClient) -> None:
        response = client.post("/upload", content=b"abc", headers={"content-type": "application/octet-stream"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == 101

    def test_missing_file_field(self, client: TestClient) -> None:
        response = client.post("/upload", data={"name": "a.txt", "file": "not a file"})

        assert response.status_code == 400
        assert response.json() == {"OK": 0, "error": {"code": 101, "message": "Failed to open input stream."}}

    def test_garbled_chunk_parameters(self, client: TestClient) -> None:
        response = client.post(
            "/upload?name=a.txt&chunk=first&chunks=2",
            content=b"abc",
            headers={"content-type": "application/octet-stream"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == 101

    def test_responses_are_not_cached(self, client: TestClient) -> None:
        response = client.post("/upload", files={"file": ("a.txt", b"x", "text/plain")})

        assert response.headers["cache-control"].startswith("no-store, no-cache")
        assert response.headers["pragma"] == "no-cache"
        assert response.headers["expires"] == "Mon, 26 Jul 1997 05:00:00 GMT"
        assert "last-modified" in response.headers

    def test_preflight(self, client: TestClient) -> None:
        response = client.options("/upload")

        assert response.status_code == 200

    def test_cors_header(self, client: TestClient) -> None:
        response = client.post(
            "/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            headers={"origin": "https://app.example.com"},
        )

        assert response.headers["access-control-allow-origin"] in {"*", "https://app.example.com"}


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}

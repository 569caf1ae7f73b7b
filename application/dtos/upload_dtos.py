import tempfile
from datetime import timedelta
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from application.ports.upload_policies import FileChecker, FileNameSanitizer, FileSizeProbe
from domain.services.file_name_service import FileNameService
from domain.value_objects.upload_result import UploadResult


class UploadConfiguration(BaseModel):
    """Resolved options for one upload operation.

    Built once per request and never mutated; unknown options are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    file_data_name: str = Field("file", min_length=1, description="Multipart field holding the payload")
    target_dir: Path = Field(..., description="Directory committed files land in")
    tmp_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "plupload",
        description="Directory used to spool raw request bodies",
    )
    chunk: int = Field(0, ge=0, description="Zero-based index of this chunk")
    chunks: int = Field(0, ge=0, description="Total number of chunks, 0 when not chunked")
    file_name: str | None = Field(None, description="Raw client-supplied name, before sanitization")
    allowed_extensions: frozenset[str] | None = Field(
        None,
        description="Lower-cased extension allow-list, None allows any",
    )
    append_chunks_to_target: bool = Field(
        True,
        description="Append chunks to <target>.part instead of a side directory of chunk files",
    )
    combine_on_complete: bool = Field(
        True,
        description="Side-directory mode: assemble as soon as every chunk is present",
    )
    cleanup: bool = Field(True, description="Sweep stale partials and drop consumed chunks")
    max_file_age: timedelta = Field(timedelta(hours=5), description="Age after which partials are stale")
    delay: float = Field(0, ge=0, description="Artificial pause in seconds, for client testing")

    name_sanitizer: FileNameSanitizer | None = None
    file_checker: FileChecker | None = None
    file_size_probe: FileSizeProbe | None = None

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def parse_allowed_extensions(cls, v: Any) -> frozenset[str] | None:  # noqa: ANN401
        """Accept a set, a list or a comma separated string."""
        return FileNameService.parse_extensions(v)

    @model_validator(mode="after")
    def validate_chunk_index(self) -> Self:
        if self.chunks and self.chunk >= self.chunks:
            msg = f"Chunk index {self.chunk} out of range for {self.chunks} chunks"
            raise ValueError(msg)
        return self

    @property
    def is_chunked(self) -> bool:
        return self.chunks > 0

    @property
    def is_last_chunk_index(self) -> bool:
        return self.is_chunked and self.chunk == self.chunks - 1

    def with_request(self, *, file_name: str | None, chunk: int, chunks: int) -> Self:
        """Derive the configuration of one request, re-running validation."""
        return type(self).model_validate(
            {**dict(self), "file_name": file_name, "chunk": chunk, "chunks": chunks},
        )


class UploadParams(BaseModel):
    """Raw upload parameters as they arrive from query string or form fields."""

    name: str | None = Field(None, description="Raw file name")
    chunk: str | None = Field(None, description="Zero-based chunk index")
    chunks: str | None = Field(None, description="Total chunk count, 0 when not chunked")


class UploadResponse(BaseModel):
    """Success envelope returned to upload clients."""

    ok: int = Field(1, serialization_alias="OK")
    info: UploadResult


class UploadErrorDetail(BaseModel):
    code: int
    message: str


class UploadErrorResponse(BaseModel):
    """Failure envelope returned to upload clients."""

    ok: int = Field(0, serialization_alias="OK")
    error: UploadErrorDetail

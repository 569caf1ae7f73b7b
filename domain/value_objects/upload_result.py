from pydantic import BaseModel, ConfigDict, Field


class UploadResult(BaseModel):
    """Outcome of one upload request.

    ``chunk`` is only set for intermediate chunk acknowledgements; a completed
    upload reports the committed file without it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Sanitized file name")
    path: str = Field(..., description="Absolute path of the final file")
    size: int = Field(..., ge=0, description="Size in bytes received or committed so far")
    chunk: int | None = Field(None, ge=0, description="Index of the acknowledged chunk")

    @property
    def is_complete(self) -> bool:
        return self.chunk is None

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ChunkUpload", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    upload_log_level: str | None = Field(
        default=None,
        validation_alias="UPLOAD_LOG_LEVEL",
        description="Level for the upload engine loggers, defaults to LOG_LEVEL.",
    )
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    cors_allow_origin: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGIN")

    # Uploads
    upload_target_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "uploads",
        validation_alias="UPLOAD_TARGET_DIR",
    )
    upload_tmp_dir: Path = Field(
        default=Path(tempfile.gettempdir()) / "plupload",
        validation_alias="UPLOAD_TMP_DIR",
    )
    upload_file_data_name: str = Field(default="file", validation_alias="UPLOAD_FILE_DATA_NAME")
    upload_allowed_extensions: str = Field(
        default="",
        validation_alias="UPLOAD_ALLOWED_EXTENSIONS",
        description="Comma separated extension allow-list, empty allows any extension.",
    )
    upload_append_chunks: bool = Field(
        default=True,
        validation_alias="UPLOAD_APPEND_CHUNKS",
        description="Append chunks to <target>.part; False keeps one file per chunk in <target>.dir.part.",
    )
    upload_combine_on_complete: bool = Field(
        default=True,
        validation_alias="UPLOAD_COMBINE_ON_COMPLETE",
    )
    upload_cleanup: bool = Field(default=True, validation_alias="UPLOAD_CLEANUP")
    upload_max_file_age: int = Field(
        default=5 * 3600,
        validation_alias="UPLOAD_MAX_FILE_AGE",
        description="Seconds after which partial uploads are considered abandoned.",
    )
    upload_delay: float = Field(
        default=0,
        validation_alias="UPLOAD_DELAY",
        description="Artificial pause per request in seconds, to simulate a slow network.",
    )
    upload_verify_signatures: bool = Field(
        default=False,
        validation_alias="UPLOAD_VERIFY_SIGNATURES",
    )


settings = Settings()

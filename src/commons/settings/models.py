"""Pydantic settings models for application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "workout-logger-api"
    version: str = "0.1.0"
    environment: Literal["dev", "test", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    api_prefix: str = ""
    docs_enabled: bool = True


class BucketSettings(BaseModel):
    """Bucket name configuration."""

    videos: str = "wlogger-videos"


class BlobStorageSettings(BaseModel):
    """Blob storage settings (MinIO/S3)."""

    provider: Literal["minio", "s3"] = "minio"
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str = "us-east-1"
    buckets: BucketSettings = Field(default_factory=BucketSettings)


class DocumentCollectionSettings(BaseModel):
    """Document DB collection names."""

    users: str = "users"
    workout_logs: str = "workoutlogs"


class DocumentDBSettings(BaseModel):
    """Document database settings (MongoDB)."""

    provider: Literal["mongodb"] = "mongodb"
    host: str = "localhost"
    port: int = 27017
    username: str = ""
    password: str = ""
    database: str = "wlogger"
    auth_source: str = "admin"
    collections: DocumentCollectionSettings = Field(
        default_factory=DocumentCollectionSettings
    )


class AuthSettings(BaseModel):
    """Session token verification settings."""

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    cookie_name: str = "token"


class UploadSettings(BaseModel):
    """Set video upload limits."""

    max_files_per_request: int = Field(default=5, ge=1, le=20)
    max_video_size_mb: int = Field(default=200, ge=1)
    form_field: str = "formVideos"

    @property
    def max_video_size_bytes(self) -> int:
        """Upload size limit in bytes."""
        return self.max_video_size_mb * 1024 * 1024


class StreamingSettings(BaseModel):
    """Video playback streaming settings."""

    chunk_size_bytes: int = Field(default=65536, ge=1024)


class TelemetrySettings(BaseModel):
    """Telemetry and observability settings."""

    enabled: bool = True
    log_format: Literal["json", "text"] = "json"
    log_level: str = "INFO"


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    document_db: DocumentDBSettings = Field(default_factory=DocumentDBSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    streaming: StreamingSettings = Field(default_factory=StreamingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WLOGGER__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

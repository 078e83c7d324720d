# src/media_repo/config/settings.py
from typing import Any, Dict, List, Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ["local", "s3"]
FILENAME_STRATEGIES = ["timestamp", "original"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from media_repo.config.settings import get_settings
        settings = get_settings()
        api_key = settings.api_key
    """

    # Application Settings
    app_name: str = Field(
        default="media-repo",
        description="Application name"
    )

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=3000, description="Port uvicorn listens on")

    # Shared secret accepted in the `x-api-key` header or `apikey` query param
    api_key: str = Field(
        default="my-secret-api-key-12345",
        description="Shared API key guarding uploads and listings"
    )

    # Storage Configuration
    storage_backend: str = Field(
        default="local",
        description="Storage backend: local or s3"
    )

    upload_dir: str = Field(
        default="uploads",
        description="Root directory for the local backend"
    )

    uploads_url_path: str = Field(
        default="/uploads",
        description="URL path the local upload directory is served from"
    )

    filename_strategy: str = Field(
        default="timestamp",
        description="timestamp (unique, prefixed names) or original (may overwrite)"
    )

    list_max_results: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of objects returned per category by the S3 backend"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="media-repo",
        description="S3 bucket holding uploaded media"
    )

    s3_public_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL for objects; presigned URLs are used when unset"
    )

    s3_presign_expiry_seconds: int = Field(
        default=3600,
        ge=1,
        description="Lifetime of presigned retrieval URLs"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL"
    )

    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("storage_backend", "filename_strategy", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        """Accept any casing from the environment."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v):
        """Validate storage backend is one of the allowed values."""
        if v not in STORAGE_BACKENDS:
            raise ValueError(f"Invalid storage_backend: {v}. Must be one of {STORAGE_BACKENDS}")
        return v

    @field_validator("filename_strategy")
    @classmethod
    def validate_filename_strategy(cls, v):
        """Validate filename strategy is one of the allowed values."""
        if v not in FILENAME_STRATEGIES:
            raise ValueError(f"Invalid filename_strategy: {v}. Must be one of {FILENAME_STRATEGIES}")
        return v

    @field_validator("uploads_url_path")
    @classmethod
    def normalize_uploads_url_path(cls, v):
        return "/" + v.strip("/")

    @field_validator("s3_public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/") if v else v

    def get_display_dict(self) -> Dict[str, Any]:
        """Get configuration as a dictionary with secrets masked.

        Returns:
            Dictionary of setting names to printable values
        """
        values = self.model_dump()
        for secret in ("api_key", "aws_secret_access_key"):
            value = values.get(secret)
            if value:
                values[secret] = "****" + value[-4:] if len(value) > 8 else "****"
        return values

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()

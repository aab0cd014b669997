"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - auth_mode defaults to "header" (development); production sets "jwt" plus jwt_secret
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from closetmap.core.domain_types import AuthMode


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://closetmap:closetmap@db:5432/closetmap"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity
    auth_mode: AuthMode = AuthMode.HEADER
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # Image storage (Cloudinary)
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "closetmap"
    max_image_bytes: int = 10 * 1024 * 1024
    image_upload_timeout_seconds: float = 20.0

    # Requests
    request_timeout_seconds: float = 30.0
    barcode_max_attempts: int = 5

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

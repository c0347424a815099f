"""Application settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    """Runtime configuration, read from ``TASKBOARD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    env: str = "development"
    log_level: str = "info"

    database_path: Path = Path("tasks.db")
    database_timeout: float = Field(default=5.0, gt=0)

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = Field(default=60 * 24 * 30, gt=0)

    default_page_limit: int = Field(default=10, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def require_real_secret(self) -> "Settings":
        if not self.is_development and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("TASKBOARD_JWT_SECRET must be set outside development")
        return self

    @property
    def is_development(self) -> bool:
        return self.env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

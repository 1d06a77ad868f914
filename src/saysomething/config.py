"""
Application configuration settings using Pydantic Settings.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Settings loaded from SAYSOMETHING_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="SAYSOMETHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "SaySomething"
    log_level: str = "INFO"

    # Public origin the survey pages are served from; used for share links.
    base_url: str = "http://localhost:3000"

    # Entropy of generated admin tokens, in bytes.
    admin_token_bytes: int = 16

    # YAML/JSON survey definition to pre-seed at startup.
    survey_file: Optional[str] = None

    @field_validator("admin_token_bytes")
    @classmethod
    def _enough_entropy(cls, v: int) -> int:
        if v < 16:
            raise ValueError("admin_token_bytes must be at least 16")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

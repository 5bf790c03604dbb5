"""Application configuration model using pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_BATCH_SIZE = 10000


class Config(BaseSettings):
    """Application configuration loaded from environment variables and .env file.

    app_key and secret_key are read for convenience only; they are never
    written back anywhere.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_base_url: str = "https://api.yotpo.com"
    batch_size: int = 5000
    pacing_delay_seconds: float = 0.5
    request_timeout_seconds: float | None = None
    batch_retry_attempts: int = 1
    log_level: str = "INFO"
    app_key: str | None = None
    secret_key: str | None = None

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: str) -> str:
        """Base URL must be http(s); trailing slash is dropped."""
        if not value.startswith(("https://", "http://")):
            msg = "api_base_url must start with http:// or https://"
            raise ValueError(msg)
        return value.rstrip("/")

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, value: int) -> int:
        """Batch size must be between 1 and MAX_BATCH_SIZE."""
        if value < 1 or value > MAX_BATCH_SIZE:
            msg = f"batch_size must be between 1 and {MAX_BATCH_SIZE}"
            raise ValueError(msg)
        return value

    @field_validator("pacing_delay_seconds")
    @classmethod
    def validate_pacing_delay(cls, value: float) -> float:
        """Pacing delay must be non-negative."""
        if value < 0:
            msg = "pacing_delay_seconds must not be negative"
            raise ValueError(msg)
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_request_timeout(cls, value: float | None) -> float | None:
        """Timeout, when set, must be positive."""
        if value is not None and value <= 0:
            msg = "request_timeout_seconds must be positive"
            raise ValueError(msg)
        return value

    @field_validator("batch_retry_attempts")
    @classmethod
    def validate_batch_retry_attempts(cls, value: int) -> int:
        """Batch attempts must be between 1 and 5."""
        if value < 1 or value > 5:
            msg = "batch_retry_attempts must be between 1 and 5"
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value

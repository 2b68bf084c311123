"""SDK configuration using Pydantic Settings.

Settings are loaded from environment variables. Optionally, point
`ENV_FILE` at a local env file for development.
"""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Cloudlets client settings with type validation.

    Every value can be overridden per client; these are the defaults a
    Session falls back to.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # API endpoint
    cloudlets_base_url: str = "https://localhost"
    cloudlets_request_timeout: float = 30.0
    cloudlets_user_agent: str = "cloudlets-sdk"

    # Observability
    cloudlets_log_level: str = "INFO"
    cloudlets_structured_logs: bool = True
    cloudlets_request_id_header: str = "X-Request-ID"

    @field_validator("cloudlets_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("cloudlets_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("cloudlets_request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("cloudlets_request_timeout must be greater than 0")
        return v

    @field_validator("cloudlets_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level and reject unknown names."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"cloudlets_log_level must be one of: {', '.join(_LOG_LEVELS)}")
        return level


settings = Settings()

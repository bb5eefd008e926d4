"""Centralized settings for taskcollab via Pydantic BaseSettings.

All configuration is read from environment variables with the TASKCOLLAB_
prefix, falling back to the defaults defined here. Set values in a .env file
or export them in the shell before running the CLI.

Library classes (clients, controller, poller) take explicit arguments; only
the CLI reads the module-level ``settings`` singleton.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variable names are formed by uppercasing the field name and
    prepending the TASKCOLLAB_ prefix.  Example: TASKCOLLAB_API_BASE_URL
    overrides api_base_url.
    """

    # Record store
    api_base_url: str = "http://localhost:8080/api"
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Group discussion polling
    comment_poll_interval_seconds: float = Field(default=30.0, gt=0)

    # Logging (CLI only)
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="TASKCOLLAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level singleton; import this from entry points
settings = Settings()

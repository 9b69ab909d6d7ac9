"""Pydantic models for alfred-cli settings."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file: Path | None = None  # Default: no file logging
    json_format: bool = False


class AppConfig(BaseModel):
    """Root settings for alfred-cli, stored in settings.json."""

    model_config = ConfigDict(extra="forbid")

    shell: str = "bash"
    verbose: bool = False
    propagate_exit_code: bool = False
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

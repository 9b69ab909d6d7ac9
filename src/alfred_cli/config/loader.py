"""Settings loading from the cache directory and environment variables."""

import json
import os
from pathlib import Path

from pydantic import ValidationError

from alfred_cli.config.defaults import (
    ENV_LOG_LEVEL,
    ENV_SHELL,
    ENV_VERBOSE,
    TRUTHY_VALUES,
    get_settings_path,
)
from alfred_cli.config.schema import AppConfig
from alfred_cli.exceptions import ConfigError, ConfigValidationError

# Global config instance (singleton)
_config: AppConfig | None = None


def load_config(settings_path: Path | None = None) -> AppConfig:
    """Load settings from a JSON file and environment variables.

    A missing settings file is not an error: defaults are used instead.

    Args:
        settings_path: Path to settings.json. If None, uses the cache directory.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigError: If the file cannot be read.
        ConfigValidationError: If the file is not valid JSON or has a bad shape.
    """
    path = settings_path or get_settings_path()

    if not path.exists():
        return _apply_env_overrides(AppConfig())

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read settings from {path}: {e}") from e

    try:
        data = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Settings file {path} is not valid JSON: {e}") from e

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid settings in {path}: {e}") from e

    return _apply_env_overrides(config)


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    """Apply environment variable overrides to configuration."""
    shell = os.environ.get(ENV_SHELL)
    if shell:
        config.shell = shell

    verbose = os.environ.get(ENV_VERBOSE)
    if verbose:
        config.verbose = verbose.lower() in TRUTHY_VALUES

    log_level = os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        config.logging.level = log_level.upper()

    return config


def get_config() -> AppConfig:
    """Get the current configuration (singleton).

    Loads config on first access, caches for subsequent calls.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (mainly for testing)."""
    global _config
    _config = None

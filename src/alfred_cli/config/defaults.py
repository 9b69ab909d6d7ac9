"""Default configuration values and paths."""

import os
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "alfred-cli"

# Default directories
DEFAULT_CACHE_DIR: Final[Path] = Path.home() / ".cache" / APP_NAME

# Default file names inside the cache directory
COMMANDS_FILE_NAME: Final[str] = "commands.json"
SETTINGS_FILE_NAME: Final[str] = "settings.json"

# Environment variable names
ENV_CACHE_DIR: Final[str] = "ALFRED_CACHE_DIR"
ENV_LOG_LEVEL: Final[str] = "ALFRED_LOG_LEVEL"
ENV_VERBOSE: Final[str] = "ALFRED_VERBOSE"
ENV_SHELL: Final[str] = "ALFRED_SHELL"

# Set by click/typer when the shell asks for completions
ENV_COMPLETE: Final[str] = "_ALFRED_COMPLETE"

TRUTHY_VALUES: Final[tuple[str, ...]] = ("1", "true", "yes", "on")


def get_cache_dir() -> Path:
    """Get the cache directory holding commands and settings."""
    env_path = os.environ.get(ENV_CACHE_DIR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CACHE_DIR


def get_settings_path() -> Path:
    """Get the settings file path."""
    return get_cache_dir() / SETTINGS_FILE_NAME

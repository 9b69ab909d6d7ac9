"""Configuration management."""

from alfred_cli.config.loader import get_config, load_config, reset_config
from alfred_cli.config.schema import AppConfig

__all__ = ["AppConfig", "get_config", "load_config", "reset_config"]

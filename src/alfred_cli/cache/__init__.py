"""Local cache holding the user's command set and settings."""

from alfred_cli.cache.local import CachePaths, LocalCache

__all__ = ["CachePaths", "LocalCache"]

"""JSON files in a per-user cache directory.

The cache directory holds two files:

    commands.json   the user's command set (a JSON array)
    settings.json   alfred-cli settings (a JSON object)

On first use the commands file is seeded from a bundled example.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from alfred_cli.config.defaults import (
    COMMANDS_FILE_NAME,
    SETTINGS_FILE_NAME,
    get_cache_dir,
)
from alfred_cli.exceptions import CacheCorruptedError, CacheError, CacheNotFoundError

logger = logging.getLogger(__name__)

EXAMPLE_COMMANDS_RESOURCE = "example.commands.json"


@dataclass(frozen=True)
class CachePaths:
    """Locations of the cache files."""

    directory: Path
    commands: Path
    settings: Path

    @classmethod
    def for_directory(cls, directory: Path) -> "CachePaths":
        return cls(
            directory=directory,
            commands=directory / COMMANDS_FILE_NAME,
            settings=directory / SETTINGS_FILE_NAME,
        )


def load_example_commands() -> str:
    """Return the bundled example command set as JSON text."""
    resource = resources.files("alfred_cli").joinpath("assets", EXAMPLE_COMMANDS_RESOURCE)
    return resource.read_text(encoding="utf-8")


class LocalCache:
    """Reads and writes the cache files."""

    def __init__(
        self,
        cache_dir: Path | None = None,
        console: Console | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            cache_dir: Cache directory. Defaults to ~/.cache/alfred-cli
                or $ALFRED_CACHE_DIR.
            console: Console for user-facing messages.
        """
        self.paths = CachePaths.for_directory(cache_dir or get_cache_dir())
        self.console = console or Console()

    def exists(self) -> bool:
        return self.paths.commands.exists()

    def init_files(self) -> None:
        """Create the cache directory and seed missing files.

        Existing files are left untouched.
        """
        try:
            self.paths.directory.mkdir(parents=True, exist_ok=True)
            if not self.paths.commands.exists():
                self.paths.commands.write_text(load_example_commands(), encoding="utf-8")
                logger.info("Seeded %s with example commands", self.paths.commands)
            if not self.paths.settings.exists():
                self.paths.settings.write_text("{}", encoding="utf-8")
        except OSError as e:
            raise CacheError(f"Cannot initialize cache in {self.paths.directory}: {e}") from e

    def clear(self) -> list[Path]:
        """Delete the cache files.

        Returns:
            The files that were actually removed.
        """
        removed = []
        for path in (self.paths.commands, self.paths.settings):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path)
        logger.info("Cleared %d cache files", len(removed))
        return removed

    def load_commands(self) -> Any:
        """Parse the commands file.

        Returns:
            The decoded JSON document, not yet validated.

        Raises:
            CacheNotFoundError: If the file does not exist.
            CacheCorruptedError: If the file is not valid JSON.
        """
        return self._read_json(self.paths.commands)

    def _read_json(self, path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheNotFoundError(f"Cache file not found: {path}") from e
        except OSError as e:
            raise CacheError(f"Cannot read {path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CacheCorruptedError(f"Cache file {path} is not valid JSON: {e}") from e

    def interactive_init(
        self,
        confirm: Callable[..., bool] = typer.confirm,
    ) -> bool:
        """Offer to seed the cache with example commands.

        Args:
            confirm: Prompt function, ``typer.confirm`` by default.

        Returns:
            True if the cache exists afterwards.

        Raises:
            typer.Exit: If the user declines.
        """
        if self.exists():
            self.console.print("✅ Local cache found, no need to initialize.")
            return True

        accepted = confirm(
            "No local cache found. Do you want to initialize it with example commands?",
            default=True,
        )
        if not accepted:
            self.console.print("❌ Local cache initialization canceled.")
            raise typer.Exit(0)

        self.init_files()
        self.console.print("✅ Local cache initialized with example commands.")
        self.console.print(
            f"You can find the commands file at: {self.paths.commands}",
            highlight=False,
            soft_wrap=True,
        )
        return True

"""Pytest fixtures for alfred-cli tests."""

import io
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from alfred_cli.cache import LocalCache
from alfred_cli.config import reset_config
from alfred_cli.config.defaults import ENV_CACHE_DIR, ENV_LOG_LEVEL, ENV_SHELL, ENV_VERBOSE


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_config_fixture(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset config singleton and alfred env vars between tests."""
    for name in (ENV_CACHE_DIR, ENV_LOG_LEVEL, ENV_SHELL, ENV_VERBOSE):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def raw_commands() -> list[dict[str, Any]]:
    """A small command set exercising options and inheritance."""
    return [
        {
            "name": "greet",
            "description": "Say hello",
            "command": {"cmd": "echo hello ${name}"},
            "options": [
                {"flags": "-n, --name <name>", "description": "Who to greet"},
            ],
        },
        {
            "name": "greet-twice",
            "description": "Say hello twice",
            "extends": "greet",
            "command": {"cmd": "{super} && {super}"},
        },
        {
            "name": "where",
            "description": "Print the working directory",
            "command": {"dir": "/", "cmd": "pwd"},
        },
    ]


@pytest.fixture
def local_cache(temp_dir: Path) -> LocalCache:
    """A LocalCache rooted in a temporary directory."""
    return LocalCache(temp_dir / "cache", console=Console(file=io.StringIO()))


class ConsolePair:
    """Stdout/stderr consoles writing to in-memory buffers."""

    def __init__(self) -> None:
        self.out_buffer = io.StringIO()
        self.err_buffer = io.StringIO()
        self.console = Console(file=self.out_buffer, width=200, color_system=None)
        self.err_console = Console(file=self.err_buffer, width=200, color_system=None)

    @property
    def out(self) -> str:
        return self.out_buffer.getvalue()

    @property
    def err(self) -> str:
        return self.err_buffer.getvalue()


@pytest.fixture
def consoles() -> ConsolePair:
    """Capture console output without touching sys.stdout."""
    return ConsolePair()

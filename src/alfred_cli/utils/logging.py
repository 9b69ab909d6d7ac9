"""Logging setup for alfred-cli.

Records may carry run context through ``extra``; the fields listed in
``CONTEXT_FIELDS`` are rendered by both formatters::

    logger.debug("Script finished", extra={"command": "deploy", "exit_code": 0})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Package logger; modules log through children of it
logger = logging.getLogger("alfred_cli")

CONTEXT_FIELDS = ("command", "script", "cwd", "exit_code")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name, value in _context(record).items():
            entry[name] = str(value) if isinstance(value, Path) else value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry["location"] = f"{record.module}:{record.funcName}:{record.lineno}"
        return json.dumps(entry)


class ConsoleFormatter(logging.Formatter):
    """``LEVEL logger: message key=value`` lines, colored by level."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        line = f"{level} {record.name}: {record.getMessage()}"
        context = " ".join(f"{name}={value}" for name, value in _context(record).items())
        return f"{line} [{context}]" if context else line


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    json_format: bool = False,
    use_color: bool | None = None,
) -> logging.Logger:
    """Configure the ``alfred_cli`` logger from settings.

    Args:
        level: Level name; unknown names fall back to WARNING.
        log_file: Also write JSON lines to this file.
        json_format: Emit JSON on stderr instead of plain lines.
        use_color: Color stderr output. Defaults to stderr being a TTY.

    Returns:
        The configured package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    if use_color is None:
        use_color = sys.stderr.isatty()

    logger.setLevel(numeric_level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(
        JSONFormatter() if json_format else ConsoleFormatter(use_color=use_color)
    )
    logger.addHandler(stderr_handler)

    if log_file:
        log_file = log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    # Records stop here, the root logger never sees them
    logger.propagate = False

    return logger

"""Exception hierarchy for alfred-cli."""

from dataclasses import dataclass


class AlfredError(Exception):
    """Base exception for all alfred-cli errors."""

    exit_code: int = 1
    user_message: str = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


# Cache Errors
class CacheError(AlfredError):
    """Local cache errors."""

    exit_code = 10
    user_message = "Cache error"


class CacheNotFoundError(CacheError):
    """Commands cache file does not exist."""

    exit_code = 11
    user_message = "No local cache found. Run 'alfred --init' first."


class CacheCorruptedError(CacheError):
    """Cache file exists but cannot be parsed."""

    exit_code = 12
    user_message = "Cache file is corrupted. Try 'alfred --clear-cache'"


# Config Errors
class ConfigError(AlfredError):
    """Configuration errors."""

    exit_code = 20
    user_message = "Configuration error"


class ConfigValidationError(ConfigError):
    """Configuration validation failed."""

    exit_code = 22
    user_message = "Invalid configuration"


@dataclass(frozen=True)
class SchemaIssue:
    """A single problem found in a command definition.

    Attributes:
        path: Dotted location of the offending field, e.g. ``0.extends``.
        code: Machine-readable error code.
        message: Human-readable description.
    """

    path: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code} {self.path or '<root>'}: {self.message}"


class SchemaError(ConfigValidationError):
    """Command definitions do not match the expected shape."""

    user_message = "Invalid command definitions"

    def __init__(self, issues: list[SchemaIssue]) -> None:
        self.issues = list(issues)
        lines = "\n".join(f"  {issue}" for issue in self.issues)
        super().__init__(f"{self.user_message}:\n{lines}")


# Command Errors
class CommandError(AlfredError):
    """Command registration or execution errors."""

    exit_code = 40
    user_message = "Command error"


class IllegalStateError(CommandError):
    """An internal invariant was violated."""

    exit_code = 41
    user_message = "Illegal state"


class InvalidOptionError(CommandError):
    """An option definition cannot be turned into a CLI option."""

    exit_code = 42
    user_message = "Invalid option definition"

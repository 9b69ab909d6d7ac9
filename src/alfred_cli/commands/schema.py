"""Pydantic models and validation for command definitions.

A command set is a JSON array of definitions. Each entry is either a
complete definition (strict shape) or a partial one that names a parent
through ``extends`` and only overrides some of its fields. Both shapes
reject unknown properties at every level.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StrictStr,
    StringConstraints,
    Tag,
    ValidationError,
    conlist,
)

from alfred_cli.exceptions import SchemaError, SchemaIssue

NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]


class OptionType(str, Enum):
    """Value parsers available to command options."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    URL = "url"
    PATH = "path"


def _command_shape(value: Any) -> str:
    return "list" if isinstance(value, list) else "object"


class CommandSpec(BaseModel):
    """Shell script to run and the directory to run it in."""

    model_config = ConfigDict(extra="forbid")

    dir: StrictStr | None = None
    cmd: NonEmptyStr


class CommandConfig(BaseModel):
    """Per-command behaviour switches."""

    model_config = ConfigDict(extra="forbid")

    confirm: StrictBool | None = None


class OptionSpec(BaseModel):
    """A CLI option exposed by a command."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    flags: StrictStr
    description: StrictStr
    required: StrictBool | None = None
    default_value: Any = Field(default=None, alias="defaultValue")
    env_var: StrictStr | None = Field(default=None, alias="envVar")
    choices: list[StrictStr] | None = None
    type: OptionType | None = None


CommandField = Annotated[
    Union[
        Annotated[CommandSpec, Tag("object")],
        Annotated[conlist(CommandSpec, min_length=1), Tag("list")],
    ],
    Discriminator(_command_shape),
]


class CommandDefinition(BaseModel):
    """A fully specified command definition."""

    model_config = ConfigDict(extra="forbid")

    name: NonEmptyStr
    description: StrictStr
    command: CommandField
    config: CommandConfig | None = None
    extends: StrictStr | None = None
    options: list[OptionSpec] = Field(default_factory=list)

    @property
    def scripts(self) -> list[CommandSpec]:
        """Scripts to execute, whether one or several were given."""
        if isinstance(self.command, list):
            return list(self.command)
        return [self.command]

    @property
    def needs_confirmation(self) -> bool:
        return bool(self.config and self.config.confirm)


# Partial shapes used by definitions that extend another one


class PartialCommandSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dir: StrictStr | None = None
    cmd: NonEmptyStr | None = None


class PartialOptionSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    flags: StrictStr | None = None
    description: StrictStr | None = None
    required: StrictBool | None = None
    default_value: Any = Field(default=None, alias="defaultValue")
    env_var: StrictStr | None = Field(default=None, alias="envVar")
    choices: list[StrictStr] | None = None
    type: OptionType | None = None


PartialCommandField = Annotated[
    Union[
        Annotated[PartialCommandSpec, Tag("object")],
        Annotated[list[PartialCommandSpec], Tag("list")],
    ],
    Discriminator(_command_shape),
]


class PartialCommandDefinition(BaseModel):
    """A definition that inherits missing fields from ``extends``."""

    model_config = ConfigDict(extra="forbid")

    name: NonEmptyStr
    description: StrictStr | None = None
    command: PartialCommandField | None = None
    config: CommandConfig | None = None
    extends: StrictStr
    options: list[PartialOptionSpec] | None = None


ValidatedDefinition = Union[CommandDefinition, PartialCommandDefinition]

_UNION_TAGS = frozenset({"object", "list"})

_REQUIRED_MESSAGES = {
    "name": "Command name is required",
    "cmd": "Command is required",
}


def _format_path(loc: Iterable[Any]) -> str:
    return ".".join(str(part) for part in loc)


def issues_from_validation_error(
    error: ValidationError, prefix: Sequence[Any] = ()
) -> list[SchemaIssue]:
    """Convert a pydantic ValidationError into schema issues.

    Args:
        error: The error raised by model validation.
        prefix: Location segments prepended to every issue path.

    Returns:
        One SchemaIssue per pydantic error.
    """
    issues = []
    for detail in error.errors():
        loc = list(detail["loc"])
        # Drop the union branch tag pydantic inserts after "command"
        loc = [
            part
            for i, part in enumerate(loc)
            if not (i > 0 and loc[i - 1] == "command" and part in _UNION_TAGS)
        ]
        code = detail["type"]
        message = detail["msg"]
        field = loc[-1] if loc else None
        if code in ("missing", "string_too_short") and field in _REQUIRED_MESSAGES:
            message = _REQUIRED_MESSAGES[field]
        issues.append(SchemaIssue(_format_path([*prefix, *loc]), code, message))
    return issues


def _check_references(raw: list[Any]) -> list[SchemaIssue]:
    """Check extends targets and name uniqueness on the raw list."""
    issues = []
    names = [
        item.get("name") for item in raw if isinstance(item, dict) and "name" in item
    ]
    seen: set[str] = set()

    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            continue

        name = item.get("name")
        if isinstance(name, str) and name:
            if name in seen:
                issues.append(
                    SchemaIssue(
                        f"{index}.name",
                        "duplicate_name",
                        f'Command "{name}" is defined more than once',
                    )
                )
            seen.add(name)

        if "extends" in item and item["extends"] not in names:
            issues.append(
                SchemaIssue(
                    f"{index}.extends",
                    "unknown_extends",
                    f'Command "{item["extends"]}" unknown',
                )
            )
    return issues


def validate_commands(raw: Any) -> list[ValidatedDefinition]:
    """Validate a raw command set.

    Entries carrying an ``extends`` key are checked against the partial
    shape, all others against the strict one. Every problem is collected
    before failing.

    Args:
        raw: Parsed JSON, expected to be a list of definitions.

    Returns:
        Validated definitions, in input order.

    Raises:
        SchemaError: If any definition is malformed, an extends target is
            unknown, or a name is used twice.
    """
    if not isinstance(raw, list):
        raise SchemaError(
            [SchemaIssue("", "list_type", "Command set must be a JSON array")]
        )

    issues: list[SchemaIssue] = []
    validated: list[ValidatedDefinition] = []

    for index, item in enumerate(raw):
        model: type[BaseModel]
        if isinstance(item, dict) and "extends" in item:
            model = PartialCommandDefinition
        else:
            model = CommandDefinition
        try:
            validated.append(model.model_validate(item))  # type: ignore[arg-type]
        except ValidationError as e:
            issues.extend(issues_from_validation_error(e, prefix=(index,)))

    issues.extend(_check_references(raw))

    if issues:
        raise SchemaError(issues)
    return validated

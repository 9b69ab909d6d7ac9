"""Inheritance resolution for command definitions.

A definition with ``extends`` starts from its parent's fields and
overrides them with its own. Before merging, ``{super}`` in the child's
script is replaced with the parent's script, so a child can wrap it:

    {"name": "build", "description": "Build", "command": {"cmd": "make"}}
    {"name": "rebuild", "extends": "build",
     "command": {"cmd": "make clean && {super}"}}

Only the direct parent is consulted; a parent that itself extends
another definition contributes its own fields only.
"""

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from alfred_cli.commands.merge import deep_merge
from alfred_cli.commands.schema import (
    CommandDefinition,
    PartialCommandDefinition,
    ValidatedDefinition,
    issues_from_validation_error,
    validate_commands,
)
from alfred_cli.exceptions import IllegalStateError, SchemaError

logger = logging.getLogger(__name__)

SUPER_TOKEN = "{super}"


def _dump(definition: ValidatedDefinition) -> dict[str, Any]:
    return definition.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _single_cmd(data: dict[str, Any]) -> str | None:
    command = data.get("command")
    if isinstance(command, dict):
        return command.get("cmd")
    return None


def merge_with_parent(
    child: PartialCommandDefinition,
    parent: ValidatedDefinition,
    index: int = 0,
) -> CommandDefinition:
    """Merge a child definition over its parent.

    Args:
        child: The definition carrying ``extends``.
        parent: The definition named by ``child.extends``.
        index: Position of the child in the command set, used in error paths.

    Returns:
        The merged definition, validated against the strict shape.

    Raises:
        SchemaError: If the merged definition is still incomplete or invalid.
    """
    parent_data = _dump(parent)
    child_data = _dump(child)

    parent_cmd = _single_cmd(parent_data)
    child_cmd = _single_cmd(child_data)
    if parent_cmd and child_cmd:
        child_data["command"]["cmd"] = child_cmd.replace(SUPER_TOKEN, parent_cmd)

    merged = deep_merge({}, parent_data, child_data)

    try:
        return CommandDefinition.model_validate(merged)
    except ValidationError as e:
        raise SchemaError(issues_from_validation_error(e, prefix=(index,))) from e


def resolve_inheritance(
    definitions: Sequence[ValidatedDefinition],
) -> list[CommandDefinition]:
    """Resolve ``extends`` for a validated command set.

    Definitions without ``extends`` are returned as they are.

    Raises:
        IllegalStateError: If a parent is missing. Validation rules this
            out, so reaching it means the two steps were run out of order.
        SchemaError: If a merged definition is invalid.
    """
    by_name: dict[str, ValidatedDefinition] = {}
    for definition in definitions:
        by_name.setdefault(definition.name, definition)

    resolved: list[CommandDefinition] = []
    for index, definition in enumerate(definitions):
        if isinstance(definition, CommandDefinition):
            resolved.append(definition)
            continue

        parent = by_name.get(definition.extends)
        if parent is None:
            raise IllegalStateError(
                f'Parent command "{definition.extends}" vanished after validation'
            )

        logger.debug("Resolving %r extends %r", definition.name, definition.extends)
        resolved.append(merge_with_parent(definition, parent, index))

    return resolved


def resolve_commands(raw: Any) -> list[CommandDefinition]:
    """Validate a raw command set and resolve inheritance.

    Args:
        raw: Parsed JSON from the commands file.

    Returns:
        Fully resolved definitions, in input order.

    Raises:
        SchemaError: On any shape or reference problem.
    """
    definitions = resolve_inheritance(validate_commands(raw))
    logger.debug("Resolved %d command definitions", len(definitions))
    return definitions

"""Command definitions: validation, inheritance, templating and execution.

Usage:
    from alfred_cli.commands import CommandRegistry, Executor, resolve_commands

    registry = CommandRegistry(resolve_commands(raw_json))
    definition = registry.get("deploy")
    results = await Executor().run_all(definition.scripts, {"env": "prod"})
"""

from alfred_cli.commands.executor import ExecutionResult, Executor, ExecutorConfig
from alfred_cli.commands.merge import deep_merge
from alfred_cli.commands.registry import CommandRegistry
from alfred_cli.commands.resolver import (
    merge_with_parent,
    resolve_commands,
    resolve_inheritance,
)
from alfred_cli.commands.schema import (
    CommandConfig,
    CommandDefinition,
    CommandSpec,
    OptionSpec,
    OptionType,
    PartialCommandDefinition,
    validate_commands,
)
from alfred_cli.commands.templating import render_script

__all__ = [
    # Schema
    "CommandConfig",
    "CommandDefinition",
    "CommandSpec",
    "OptionSpec",
    "OptionType",
    "PartialCommandDefinition",
    "validate_commands",
    # Resolution
    "deep_merge",
    "merge_with_parent",
    "resolve_commands",
    "resolve_inheritance",
    # Registry
    "CommandRegistry",
    # Execution
    "ExecutionResult",
    "Executor",
    "ExecutorConfig",
    "render_script",
]

"""Build click commands from resolved command definitions."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import click
import typer
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from alfred_cli.cache import LocalCache
from alfred_cli.cli.options import build_option, has_default, parse_flags
from alfred_cli.commands import (
    CommandDefinition,
    CommandRegistry,
    ExecutionResult,
    Executor,
    ExecutorConfig,
)
from alfred_cli.commands.templating import placeholder_names
from alfred_cli.config.schema import AppConfig

logger = logging.getLogger(__name__)

VERBOSE_META_KEY = "alfred.verbose"


@dataclass
class CliState:
    """Shared state handed to every command through ``ctx.obj``.

    Attributes:
        registry: The resolved command set.
        config: Application settings.
        cache: Local cache, when the CLI was started from one.
        console: Console for normal output.
        err_console: Console for errors.
    """

    registry: CommandRegistry = field(default_factory=CommandRegistry)
    config: AppConfig = field(default_factory=AppConfig)
    cache: LocalCache | None = None
    console: Console = field(default_factory=Console)
    err_console: Console = field(default_factory=lambda: Console(stderr=True))

    def create_executor(self, verbose: bool = False) -> Executor:
        return Executor(
            ExecutorConfig(
                shell=self.config.shell,
                verbose=verbose or self.config.verbose,
            ),
            console=self.console,
            err_console=self.err_console,
        )


def supplied_options(
    ctx: click.Context,
    params: Mapping[str, Any],
    defaulted: set[str],
) -> dict[str, Any]:
    """Keep only the options that carry a value for this invocation.

    Switches that were neither given nor defaulted come back from click
    as False; they are reported as absent so templates drop them.
    """
    options: dict[str, Any] = {}
    for name, value in params.items():
        source = ctx.get_parameter_source(name)
        if source is ParameterSource.DEFAULT and name not in defaulted:
            value = None
        options[name] = value
    return options


def run_definition(
    state: CliState,
    definition: CommandDefinition,
    options: Mapping[str, Any],
    verbose: bool = False,
) -> list[ExecutionResult]:
    """Confirm if needed, then run every script of a definition.

    Returns:
        One result per script; empty when the user cancelled.
    """
    state.console.print(f"[bold]{escape(definition.name)}[/bold]")

    if definition.needs_confirmation:
        confirmed = typer.confirm(
            f"Are you sure you want to run this command? {definition.name}"
        )
        if not confirmed:
            state.console.print("Command canceled ❌")
            return []

    logger.debug(
        "Running %d script(s)", len(definition.scripts), extra={"command": definition.name}
    )
    executor = state.create_executor(verbose=verbose)
    results = asyncio.run(executor.run_all(definition.scripts, options))

    failed = [result for result in results if not result.success]
    if failed and state.config.propagate_exit_code:
        raise typer.Exit(failed[0].exit_code)
    return results


def build_command(definition: CommandDefinition) -> click.Command:
    """Create the click command for a definition.

    Raises:
        InvalidOptionError: If an option cannot be registered.
    """
    params = [build_option(option) for option in definition.options]
    defaulted = {
        parse_flags(option.flags).attribute
        for option in definition.options
        if has_default(option)
    }

    known = {param.name for param in params}
    for spec in definition.scripts:
        for placeholder in placeholder_names(spec.cmd):
            if placeholder not in known:
                logger.info(
                    "Command %r uses ${%s} but has no such option",
                    definition.name,
                    placeholder,
                )

    @click.pass_context
    def callback(ctx: click.Context, **params: Any) -> None:
        state = ctx.find_object(CliState) or CliState()
        verbose = bool(ctx.meta.get(VERBOSE_META_KEY, False))
        run_definition(state, definition, supplied_options(ctx, params, defaulted), verbose)

    return click.Command(
        name=definition.name,
        help=definition.description,
        short_help=definition.description,
        params=params,
        callback=callback,
    )

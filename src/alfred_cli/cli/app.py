"""Main CLI application for alfred-cli."""

import os
import sys

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from alfred_cli import __version__
from alfred_cli.cache import LocalCache
from alfred_cli.cli.builder import VERBOSE_META_KEY, CliState, build_command
from alfred_cli.cli.completion import completion_candidates
from alfred_cli.cli.picker import pick_command
from alfred_cli.commands import CommandDefinition, CommandRegistry, resolve_commands
from alfred_cli.config import get_config
from alfred_cli.config.defaults import ENV_COMPLETE
from alfred_cli.config.schema import AppConfig
from alfred_cli.exceptions import AlfredError, CommandError, IllegalStateError
from alfred_cli.utils.logging import setup_logging

PROG_NAME = "alfred"

# Root flags that work without a loaded command set
MANAGEMENT_FLAGS = frozenset(
    {
        "--init",
        "--clear-cache",
        "--version",
        "-V",
        "--install-completion",
        "--show-completion",
    }
)

app = typer.Typer(
    name=PROG_NAME,
    help="Run your own shell shortcuts as subcommands.",
    add_completion=True,
)

# Rich console for output
console = Console()
err_console = Console(stderr=True)


def _state(ctx: click.Context) -> CliState:
    return ctx.find_object(CliState) or CliState()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"alfred-cli version {__version__}")
        raise typer.Exit()


def init_callback(ctx: typer.Context, value: bool) -> None:
    """Create the local cache interactively and exit."""
    if not value or ctx.resilient_parsing:
        return
    state = _state(ctx)
    cache = state.cache or LocalCache(console=state.console)
    cache.interactive_init()
    raise typer.Exit()


def clear_cache_callback(ctx: typer.Context, value: bool) -> None:
    """Delete the local cache files and exit."""
    if not value or ctx.resilient_parsing:
        return
    state = _state(ctx)
    cache = state.cache or LocalCache(console=state.console)
    removed = cache.clear()
    if removed:
        state.console.print(f"Removed {len(removed)} cache file(s) from {cache.paths.directory}")
    else:
        state.console.print("[dim]Nothing to clear[/dim]")
    raise typer.Exit()


def print_command_table(state: CliState) -> None:
    """Print the configured commands as a table."""
    info_list = state.registry.get_command_info()
    if not info_list:
        state.console.print("[dim]No commands configured[/dim]")
        return

    table = Table(title="Available Commands")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Extends", style="dim")
    for info in info_list:
        table.add_row(escape(info["name"]), escape(info["description"]), escape(info["extends"]))
    state.console.print(table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        callback=init_callback,
        is_eager=True,
        help="Create the local cache with example commands.",
    ),
    clear_cache: bool = typer.Option(
        False,
        "--clear-cache",
        callback=clear_cache_callback,
        is_eager=True,
        help="Delete the local cache files.",
    ),
    list_commands: bool = typer.Option(
        False,
        "--list",
        "-l",
        help="List configured commands.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print each script before running it.",
    ),
) -> None:
    """Run your own shell shortcuts as subcommands."""
    ctx.meta[VERBOSE_META_KEY] = verbose

    if list_commands:
        print_command_table(_state(ctx))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("completion")
def completion_cmd(
    ctx: typer.Context,
    words: list[str] | None = typer.Argument(None, help="Words typed so far."),
) -> None:
    """Print completion candidates for commands and their flags."""
    for line in completion_candidates(_state(ctx).registry, words or []):
        typer.echo(line)


def build_cli(
    definitions: CommandRegistry | list[CommandDefinition],
    *,
    config: AppConfig | None = None,
    cache: LocalCache | None = None,
) -> click.Group:
    """Build the click group exposing every definition as a subcommand.

    Args:
        definitions: Resolved command definitions.
        config: Application settings.
        cache: Local cache backing --init and --clear-cache.

    Returns:
        The root command group.

    Raises:
        CommandError: If a definition uses a reserved subcommand name.
        InvalidOptionError: If an option cannot be registered.
        IllegalStateError: If typer does not hand back a click group.
    """
    if isinstance(definitions, CommandRegistry):
        registry = definitions
    else:
        registry = CommandRegistry(definitions)

    state = CliState(
        registry=registry,
        config=config or AppConfig(),
        cache=cache,
        console=console,
        err_console=err_console,
    )

    group = typer.main.get_command(app)
    if not isinstance(group, click.Group):
        raise IllegalStateError(
            f"typer built a {type(group).__name__}, not a click group; "
            "typer and click versions do not match"
        )
    group.context_settings = {**group.context_settings, "obj": state}

    for definition in registry:
        if definition.name in group.commands:
            raise CommandError(f"Command name {definition.name!r} is reserved")
        group.add_command(build_command(definition))

    return group


def _wants_management(args: list[str]) -> bool:
    for arg in args:
        if not arg.startswith("-"):
            return False
        if arg in MANAGEMENT_FLAGS:
            return True
    return False


def load_definitions(
    cache: LocalCache, args: list[str], completing: bool = False
) -> list[CommandDefinition]:
    """Load and resolve the command set for this invocation.

    A missing cache triggers the interactive setup, except while the
    shell is asking for completions.
    """
    if _wants_management(args):
        return []
    if not cache.exists():
        if completing:
            return []
        cache.interactive_init()
    return resolve_commands(cache.load_commands())


def _report_error(error: AlfredError) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    args = list(sys.argv[1:] if argv is None else argv)
    completing = ENV_COMPLETE in os.environ

    try:
        config = get_config()
        setup_logging(
            level=config.logging.level,
            log_file=config.logging.file,
            json_format=config.logging.json_format,
        )
        cache = LocalCache(console=console)
        registry = CommandRegistry(load_definitions(cache, args, completing))
        cli = build_cli(registry, config=config, cache=cache)

        if not args and not completing:
            name = pick_command(registry, console=console)
            if name is None:
                return
            args = [name]

        cli.main(args=args, prog_name=PROG_NAME)
    except typer.Exit as e:
        sys.exit(e.exit_code)
    except AlfredError as e:
        _report_error(e)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()

"""Interactive command picker shown when alfred runs without arguments."""

from collections.abc import Iterable
from typing import TextIO

from rapidfuzz import fuzz
from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, Prompt

from alfred_cli.commands import CommandDefinition

# Minimum rapidfuzz score (0-100) for the fallback match
DEFAULT_MIN_SCORE = 60.0


def filter_commands(
    definitions: Iterable[CommandDefinition],
    query: str,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[CommandDefinition]:
    """Select the commands matching a typed filter.

    Names containing ``query`` (case-sensitive) are returned in their
    configured order. If none does, names are ranked by fuzzy similarity
    and those scoring at least ``min_score`` are returned best first.
    """
    definitions = list(definitions)
    if not query:
        return definitions

    matches = [definition for definition in definitions if query in definition.name]
    if matches:
        return matches

    scored = [
        (fuzz.partial_ratio(query.lower(), definition.name.lower()), definition)
        for definition in definitions
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [definition for score, definition in scored if score >= min_score]


def pick_command(
    definitions: Iterable[CommandDefinition],
    *,
    console: Console | None = None,
    stream: TextIO | None = None,
) -> str | None:
    """Ask the user to choose a command.

    Args:
        definitions: Commands to choose from.
        console: Console to prompt on.
        stream: Input stream, stdin when None.

    Returns:
        The chosen command name, or None when there is nothing to choose.
    """
    definitions = list(definitions)
    console = console or Console()
    if not definitions:
        console.print("[dim]No commands configured[/dim]")
        return None

    while True:
        query = Prompt.ask(
            "Select a command 🤖 [dim](filter, Enter for all)[/dim]",
            console=console,
            default="",
            show_default=False,
            stream=stream,
        )
        matches = filter_commands(definitions, query.strip())
        if matches:
            break
        console.print(f"[dim]No command matches {escape(query)!r}[/dim]")

    for number, definition in enumerate(matches, start=1):
        console.print(
            f"  [cyan]{number:>2}[/cyan]  {escape(definition.name)} "
            f"[dim]({escape(definition.description)})[/dim]",
            highlight=False,
        )

    choice = IntPrompt.ask(
        "Command number",
        console=console,
        choices=[str(number) for number in range(1, len(matches) + 1)],
        show_choices=False,
        default=1,
        stream=stream,
    )
    return matches[choice - 1].name

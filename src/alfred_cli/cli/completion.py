"""Shell-completion candidates for commands and their flags.

Candidates use the ``value:description`` form understood by zsh's
``_describe``; other shells can cut at the first unescaped colon.
"""

from collections.abc import Sequence

from alfred_cli.cli.options import parse_flags
from alfred_cli.commands import CommandRegistry


def _escape(text: str) -> str:
    return text.replace(":", "\\:")


def completion_candidates(registry: CommandRegistry, words: Sequence[str] = ()) -> list[str]:
    """List completion candidates for the words typed so far.

    With no words, or a partial command name, every matching command is
    listed. Once the first word names a command, its flags are listed,
    narrowed by the last word when it starts with a dash.
    """
    first = words[0] if words else ""
    definition = registry.get(first) if first else None

    if definition is None:
        return [
            f"{_escape(d.name)}:{_escape(d.description)}"
            for d in registry
            if d.name.startswith(first)
        ]

    prefix = words[-1] if len(words) > 1 and words[-1].startswith("-") else ""
    candidates = []
    for option in definition.options:
        for flag in parse_flags(option.flags).names:
            if flag.startswith(prefix):
                candidates.append(f"{flag}:{_escape(option.description)}")
    return candidates

"""Fill ``${name}`` placeholders in shell scripts with option values."""

import re
from collections.abc import Mapping
from typing import Any

# Optional leading space, then ${identifier}
PLACEHOLDER_PATTERN = re.compile(r"( ?)\$\{(\w+)\}")


def format_value(value: Any) -> str:
    """Render an option value the way a shell script expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_script(script: str, options: Mapping[str, Any]) -> str:
    """Substitute option values into a script.

    Each ``${name}`` token is replaced by the value of ``options[name]``.
    When the option is missing or None the token is dropped together
    with one preceding space, so ``echo hi ${name}`` becomes ``echo hi``.
    Text that does not match the pattern (``${}`` for instance) is kept.
    """

    def replace(match: re.Match[str]) -> str:
        leading_space, name = match.groups()
        value = options.get(name)
        if value is None:
            return ""
        return leading_space + format_value(value)

    return PLACEHOLDER_PATTERN.sub(replace, script)


def placeholder_names(script: str) -> list[str]:
    """List placeholder names in order of appearance, without duplicates."""
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(script):
        if match.group(2) not in names:
            names.append(match.group(2))
    return names

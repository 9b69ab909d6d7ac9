"""Turn option definitions into click options.

Flags follow the familiar ``-s, --long <value>`` notation:

    --name <name>      option that takes a value
    --tag [tag]        value is optional; the default is used when omitted
    --force            boolean switch
    --no-color         negated switch, ``color`` is true unless given

The option key seen by script templates is the camelCased long name
(``--dry-run`` becomes ``${dryRun}``).
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import click
from pydantic import AnyUrl, TypeAdapter, ValidationError

from alfred_cli.commands.schema import OptionSpec, OptionType
from alfred_cli.exceptions import InvalidOptionError

logger = logging.getLogger(__name__)

_FLAG_SEPARATOR = re.compile(r"[\s,|]+")
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class OptionParseError(click.BadParameter):
    """A typed option value could not be parsed."""


class ValueKind(str, Enum):
    """Whether an option takes a value."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class ParsedFlags:
    """Result of parsing an option's flag string."""

    short: str | None
    long: str | None
    value: ValueKind
    negate: bool
    attribute: str

    @property
    def names(self) -> list[str]:
        return [flag for flag in (self.short, self.long) if flag]

    @property
    def is_switch(self) -> bool:
        return self.value is ValueKind.NONE


def camelcase(name: str) -> str:
    """Convert ``dry-run`` to ``dryRun``."""
    first, *rest = name.split("-")
    return first + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_flags(flags: str) -> ParsedFlags:
    """Parse a flag string such as ``-p, --port <port>``.

    Raises:
        InvalidOptionError: If the string holds no usable flag.
    """
    short: str | None = None
    long: str | None = None
    value = ValueKind.NONE

    for token in _FLAG_SEPARATOR.split(flags.strip()):
        if not token:
            continue
        if token.startswith("<") and token.endswith(">"):
            value = ValueKind.REQUIRED
        elif token.startswith("[") and token.endswith("]"):
            value = ValueKind.OPTIONAL
        elif token.startswith("--") and len(token) > 2 and long is None:
            long = token
        elif token.startswith("-") and not token.startswith("--") and len(token) > 1:
            if short is not None:
                raise InvalidOptionError(f"Option {flags!r} declares two short flags")
            short = token
        else:
            raise InvalidOptionError(f"Cannot parse option flags {flags!r}")

    if long is None and short is None:
        raise InvalidOptionError(f"Option {flags!r} has no flag")

    negate = long is not None and long.startswith("--no-")
    if long is not None:
        attribute = camelcase(long[5:] if negate else long[2:])
    else:
        attribute = short[1:]  # type: ignore[index]

    if not attribute.isidentifier():
        raise InvalidOptionError(
            f"Option {flags!r} maps to {attribute!r}, which is not a valid name"
        )

    return ParsedFlags(short, long, value, negate, attribute)


class NumberParamType(click.ParamType):
    """Integer or float."""

    name = "number"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float):
            number = value
        else:
            text = str(value).strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                number = float(text)
            except ValueError:
                number = math.nan
        # nan, inf and overflowing literals such as 1e400
        if not math.isfinite(number):
            raise OptionParseError(f"{value!r} is not a valid number.", ctx=ctx, param=param)
        return number


class BooleanParamType(click.ParamType):
    """True only for a case-insensitive ``true``."""

    name = "boolean"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"


class UrlParamType(click.ParamType):
    """Absolute URL, returned as given."""

    name = "url"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        text = str(value)
        try:
            _URL_ADAPTER.validate_python(text)
        except ValidationError:
            raise OptionParseError(f"{text!r} is not a valid URL.", ctx=ctx, param=param) from None
        return text


class PathParamType(click.ParamType):
    """Filesystem path with ``~`` expanded."""

    name = "path"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        return str(Path(str(value)).expanduser())


NUMBER = NumberParamType()
BOOLEAN = BooleanParamType()
URL = UrlParamType()
PATH = PathParamType()

PARAM_TYPES: Mapping[OptionType, click.ParamType] = {
    OptionType.NUMBER: NUMBER,
    OptionType.STRING: click.STRING,
    OptionType.BOOLEAN: BOOLEAN,
    OptionType.URL: URL,
    OptionType.PATH: PATH,
}


def param_type_for(
    option: OptionSpec,
    param_types: Mapping[OptionType, click.ParamType] = PARAM_TYPES,
) -> click.ParamType:
    """Select the value parser for an option.

    ``choices`` takes precedence over ``type``.

    Raises:
        InvalidOptionError: If the option's type has no parser.
    """
    if option.choices:
        return click.Choice(option.choices)
    if option.type is None:
        return click.STRING
    try:
        return param_types[option.type]
    except KeyError:
        raise InvalidOptionError(
            f"Unsupported type {option.type.value!r} for option {option.flags!r}"
        ) from None


def convert_default(option: OptionSpec, param_type: click.ParamType) -> Any:
    """Convert an option's default through its parser.

    Raises:
        InvalidOptionError: If the default is not a valid value.
    """
    if option.default_value is None:
        return None
    try:
        return param_type.convert(option.default_value, None, None)
    except click.BadParameter as e:
        raise InvalidOptionError(
            f"Default value of option {option.flags!r} is invalid: {e.format_message()}"
        ) from e


def has_default(option: OptionSpec) -> bool:
    """Whether the option yields a value even when not given."""
    return option.default_value is not None or parse_flags(option.flags).negate


class PresetParamType(click.ParamType):
    """Parser for an option whose value may be left out.

    The preset used for a bare ``--tag`` is passed through unparsed, so
    ``--count [n]`` of type number still accepts a bare ``--count``.
    """

    def __init__(self, inner: click.ParamType, preset: str) -> None:
        self.inner = inner
        self.preset = preset
        self.name = inner.name

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if value == self.preset:
            return value
        return self.inner.convert(value, param, ctx)

    def get_metavar(self, *args: Any, **kwargs: Any) -> str | None:
        return self.inner.get_metavar(*args, **kwargs)

    def shell_complete(self, ctx: click.Context, param: click.Parameter, incomplete: str) -> Any:
        return self.inner.shell_complete(ctx, param, incomplete)


# Value of an optional-value option given bare, when it has no default
OPTIONAL_VALUE_PRESET = "true"


def _build_switch(option: OptionSpec, flags: ParsedFlags, common: dict[str, Any]) -> click.Option:
    if option.default_value is not None:
        default = BOOLEAN.convert(option.default_value, None, None)
    else:
        default = flags.negate

    if flags.negate:
        # --no-color is declared as the off side of a --color/--no-color pair
        declarations = [f"--{flags.long[5:]}/{flags.long}"]  # type: ignore[index]
        if flags.short:
            declarations.append(f" /{flags.short}")
    else:
        declarations = list(flags.names)

    logger.debug("Registering switch %s as %r", option.flags, flags.attribute)
    return click.Option(
        [*declarations, flags.attribute],
        is_flag=True,
        default=default,
        **common,
    )


def build_option(option: OptionSpec) -> click.Option:
    """Build the click option for an option definition.

    ``default`` is only handed to click when the option has one; an
    explicit None would count as a supplied value and defeat
    ``required``.

    Raises:
        InvalidOptionError: If the flags, type or default are unusable.
    """
    flags = parse_flags(option.flags)
    common: dict[str, Any] = {
        "help": option.description,
        "required": bool(option.required),
        "envvar": option.env_var,
        "show_envvar": option.env_var is not None,
    }

    if flags.is_switch:
        return _build_switch(option, flags, common)

    param_type = param_type_for(option)
    default = convert_default(option, param_type)
    extra: dict[str, Any] = {}
    if default is not None:
        extra.update(default=default, show_default=True)
    if flags.value is ValueKind.OPTIONAL:
        # Given without a value, the option falls back to its default
        if default is None:
            param_type = PresetParamType(param_type, OPTIONAL_VALUE_PRESET)
        extra.update(
            is_flag=False,
            flag_value=default if default is not None else OPTIONAL_VALUE_PRESET,
        )

    logger.debug("Registering option %s as %r", option.flags, flags.attribute)
    return click.Option(
        [*flags.names, flags.attribute],
        type=param_type,
        **extra,
        **common,
    )

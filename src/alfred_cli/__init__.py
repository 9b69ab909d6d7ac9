"""alfred-cli: run named shell shortcuts as subcommands."""

__version__ = "0.2.0"

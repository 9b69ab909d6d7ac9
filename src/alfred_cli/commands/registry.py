"""Registry of resolved command definitions."""

from collections.abc import Iterable, Iterator

from alfred_cli.commands.schema import CommandDefinition


class CommandRegistry:
    """Lookup table over a resolved command set.

    Keeps definitions in the order they were registered, which is the
    order they appear in help output and the interactive picker.

    Usage:
        registry = CommandRegistry(resolve_commands(raw))
        definition = registry.get("deploy")
        for definition in registry:
            print(definition.name)
    """

    def __init__(self, definitions: Iterable[CommandDefinition] = ()) -> None:
        self._commands: dict[str, CommandDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: CommandDefinition) -> None:
        """Register a definition.

        Raises:
            ValueError: If a command with the same name is already registered.
        """
        if definition.name in self._commands:
            raise ValueError(f"Command '{definition.name}' is already registered")
        self._commands[definition.name] = definition

    def get(self, name: str) -> CommandDefinition | None:
        return self._commands.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._commands

    def list_names(self) -> list[str]:
        return list(self._commands)

    def get_command_info(self) -> list[dict[str, str]]:
        """Get name, description and parent of every command."""
        return [
            {
                "name": definition.name,
                "description": definition.description,
                "extends": definition.extends or "",
            }
            for definition in self._commands.values()
        ]

    def __iter__(self) -> Iterator[CommandDefinition]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

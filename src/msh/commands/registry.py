"""
Builtin command table for the msh resolver.

Builtins are registered with a name, aliases, an arity rule and the flags
they accept. The resolver matches the first word of a line against this
table; arguments are validated here before the handler builds an Action.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional, TextIO

from msh.core.exceptions import BuiltinArgError

if TYPE_CHECKING:
    from msh.core.actions import Action
    from msh.core.context import Context


@dataclass
class CommandEntry:
    """Entry for a builtin command."""

    name: str
    handler: Callable[..., "Action"]
    description: str
    usage: str | None = None
    min_args: int = 0
    max_args: Optional[int] = 0  # None for unbounded
    aliases: list[str] = field(default_factory=list)
    # flag spelling -> canonical flag name
    flags: dict[str, str] = field(default_factory=dict)

    def parse_args(self, args: list[str]) -> tuple[list[str], set[str]]:
        """Split args into positionals and flags, checking arity.

        Raises:
            BuiltinArgError: On an unknown flag or wrong argument count.
        """
        positional = []
        flags = set()
        options_done = not self.flags

        for arg in args:
            if not options_done and arg == "--":
                options_done = True
            elif not options_done and arg.startswith("-") and len(arg) > 1:
                if arg not in self.flags:
                    raise BuiltinArgError(self.name, f"unknown flag '{arg}'", self.usage)
                flags.add(self.flags[arg])
            else:
                positional.append(arg)

        count = len(positional)
        if count < self.min_args:
            raise BuiltinArgError(
                self.name,
                f"expected at least {self.min_args} argument(s), got {count}",
                self.usage,
            )
        if self.max_args is not None and count > self.max_args:
            raise BuiltinArgError(
                self.name,
                f"expected at most {self.max_args} argument(s), got {count}",
                self.usage,
            )
        return positional, flags


class CommandRegistry:
    """Registry for builtin commands."""

    def __init__(self):
        self._commands: dict[str, CommandEntry] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        name: str,
        description: str,
        usage: str | None = None,
        min_args: int = 0,
        max_args: Optional[int] = 0,
        aliases: list[str] | None = None,
        flags: dict[str, str] | None = None,
    ) -> Callable:
        """Decorator to register a builtin.

        Args:
            name: Command name (e.g., "register")
            description: Short description for help
            usage: Usage string (e.g., "register DIR...")
            min_args: Minimum number of positional arguments
            max_args: Maximum number of positional arguments, None for no limit
            aliases: Alternative names for the command
            flags: Accepted flag spellings mapped to a canonical name

        Example:
            @command_registry.register("dump", "Print all registered directories")
            def cmd_dump(ctx, args, flags, out):
                return PrintRegistryDump()
        """
        def decorator(func: Callable) -> Callable:
            entry = CommandEntry(
                name=name,
                handler=func,
                description=description,
                usage=usage or name,
                min_args=min_args,
                max_args=max_args,
                aliases=aliases or [],
                flags=flags or {},
            )
            self._commands[name] = entry

            for alias in entry.aliases:
                self._aliases[alias] = name

            return func
        return decorator

    def get(self, name: str) -> CommandEntry | None:
        """Get a command by name or alias."""
        if name in self._commands:
            return self._commands[name]
        if name in self._aliases:
            return self._commands[self._aliases[name]]
        return None

    def invoke(self, ctx: "Context", words: list[str], out: TextIO) -> "Action | None":
        """Run the builtin named by words[0].

        Returns:
            The Action built by the handler, or None if words[0] is not a builtin.

        Raises:
            BuiltinArgError: If the arguments do not fit the builtin.
        """
        entry = self.get(words[0])
        if entry is None:
            return None
        args, flags = entry.parse_args(words[1:])
        return entry.handler(ctx, args, flags, out)

    def all_commands(self) -> list[CommandEntry]:
        """Get all registered commands sorted by name."""
        return sorted(self._commands.values(), key=lambda e: e.name)

    def get_completions(self) -> dict[str, str]:
        """Get command names and descriptions for completion."""
        result = {}
        for entry in self._commands.values():
            result[entry.name] = entry.description
            for alias in entry.aliases:
                result[alias] = entry.description
        return result


# Global builtin table
command_registry = CommandRegistry()

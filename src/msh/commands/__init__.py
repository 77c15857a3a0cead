"""
Builtin commands for the msh shell.

The table is closed: importing this package registers every builtin.
"""

from __future__ import annotations

from msh.commands.registry import CommandEntry, CommandRegistry, command_registry
from msh.commands import builtins  # noqa: F401

__all__ = ["CommandEntry", "CommandRegistry", "command_registry"]

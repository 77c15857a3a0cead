"""Builtin commands interpreted by the shell itself."""
from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from msh.commands.registry import command_registry
from msh.core.actions import (
    Action,
    Continue,
    Exit,
    LoadRegistryFromFile,
    MutateRegistry,
    PrintRegistryDump,
    RegistryOp,
    SetEnv,
    SetWorkingDir,
    UnsetEnv,
)

if TYPE_CHECKING:
    from msh.core.context import Context


@command_registry.register("exit", "Terminate the shell", aliases=["quit"])
def cmd_exit(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return Exit()


@command_registry.register("help", "Display this help message")
def cmd_help(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    """Print the builtin table."""
    print("\nBuiltins:", file=out)
    for entry in command_registry.all_commands():
        aliases = f" (aliases: {', '.join(entry.aliases)})" if entry.aliases else ""
        print(f"  {entry.usage:<28} - {entry.description}{aliases}", file=out)
    print(f"  {'<program> [ARGS...]':<28} - Run in every registered directory", file=out)
    print(file=out)
    return Continue()


@command_registry.register("dump", "Print all registered directories")
def cmd_dump(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return PrintRegistryDump()


@command_registry.register(
    "cd", "Change the current working directory", usage="cd [DIR]", max_args=1
)
def cmd_cd(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    path = args[0] if args else str(ctx.session.home)
    return SetWorkingDir(path)


@command_registry.register("echo", "Print all arguments", usage="echo [ARGS...]", max_args=None)
def cmd_echo(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    print(" ".join(args), file=out)
    return Continue()


@command_registry.register(
    "var",
    "Set or delete an environment variable",
    usage="var [-d|--delete] NAME [VALUE]",
    min_args=1,
    max_args=2,
    flags={"-d": "delete", "--delete": "delete"},
)
def cmd_var(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    """Delete wins over a given value."""
    name = args[0]
    if "delete" in flags:
        return UnsetEnv(name)
    value = args[1] if len(args) > 1 else ""
    return SetEnv(name, value)


@command_registry.register(
    "register",
    "Add directories to the registry",
    usage="register DIR...",
    min_args=1,
    max_args=None,
    aliases=["reg"],
)
def cmd_register(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return MutateRegistry(RegistryOp.ADD, tuple(args))


@command_registry.register(
    "unregister",
    "Remove directories from the registry",
    usage="unregister DIR...",
    min_args=1,
    max_args=None,
    aliases=["unreg"],
)
def cmd_unregister(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return MutateRegistry(RegistryOp.REMOVE, tuple(args))


@command_registry.register(
    "register-file",
    "Add all directories listed in FILE to the registry",
    usage="register-file FILE",
    min_args=1,
    max_args=1,
    aliases=["regfile"],
)
def cmd_register_file(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return LoadRegistryFromFile(args[0])


@command_registry.register(
    "clear-register",
    "Empty the registry, then register DIRS",
    usage="clear-register [DIR...]",
    max_args=None,
    aliases=["clreg"],
)
def cmd_clear_register(ctx: "Context", args: list[str], flags: set[str], out: TextIO) -> Action:
    return MutateRegistry(RegistryOp.REPLACE, tuple(args))

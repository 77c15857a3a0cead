"""
Applies resolved Actions to the shell context.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from msh.core.actions import (
    Action,
    BufferContinuation,
    Continue,
    ExecuteExternal,
    Exit,
    LoadRegistryFromFile,
    MutateRegistry,
    PrintRegistryDump,
    RegistryOp,
    SetEnv,
    SetWorkingDir,
    UnsetEnv,
)
from msh.core.context import Context
from msh.core.exceptions import PathError, RegistryFileError
from msh.core.executor import execute
from msh.core.registry import read_registry_file, register_paths, unregister_paths
from msh.core.resolver import interpret

logger = logging.getLogger(__name__)


def apply_action(
    ctx: Context,
    action: Action,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> bool:
    """Apply one Action to the context.

    Returns:
        True if the REPL should exit.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    base = ctx.session.cwd
    logger.debug(f"Applying action: {action!r}")

    if isinstance(action, Continue):
        pass
    elif isinstance(action, Exit):
        if action.message:
            print(action.message, file=out)
        return True
    elif isinstance(action, BufferContinuation):
        ctx.push_buffer(action.partial)
    elif isinstance(action, MutateRegistry):
        if action.op is RegistryOp.ADD:
            register_paths(ctx.registry, action.paths, base, out, err)
        elif action.op is RegistryOp.REMOVE:
            unregister_paths(ctx.registry, action.paths, base, out, err)
        else:
            ctx.registry.clear()
            register_paths(ctx.registry, action.paths, base, out, err)
    elif isinstance(action, LoadRegistryFromFile):
        try:
            paths = read_registry_file(action.path, base)
        except RegistryFileError as e:
            print(e, file=err)
        else:
            register_paths(ctx.registry, paths, base, out, err)
    elif isinstance(action, PrintRegistryDump):
        print(ctx.registry.dump(), file=out)
    elif isinstance(action, SetWorkingDir):
        try:
            ctx.session.chdir(action.path)
        except PathError as e:
            print(f"cd: {action.path}: {e}", file=err)
    elif isinstance(action, SetEnv):
        ctx.session.setenv(action.name, action.value)
    elif isinstance(action, UnsetEnv):
        ctx.session.unsetenv(action.name)
    elif isinstance(action, ExecuteExternal):
        execute(action.argv, ctx.registry, ctx.session, ctx.workers, out, err)
    else:
        raise TypeError(f"Unknown action: {action!r}")

    return False


def handle_line(
    ctx: Context,
    line: str,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> bool:
    """Interpret and apply one raw input line.

    Returns:
        True if the REPL should exit.
    """
    action = interpret(ctx, line, out, err)
    return apply_action(ctx, action, out, err)

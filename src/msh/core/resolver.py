"""
Turns one raw input line into an Action.

Order of classification:
    1. A line ending in an unescaped backslash is buffered.
    2. An empty logical line does nothing.
    3. A first word naming a builtin is handled by the builtin table.
    4. Anything else is an external program broadcast to the registry.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from msh.commands import command_registry
from msh.core.actions import Action, BufferContinuation, Continue, ExecuteExternal
from msh.core.context import Context
from msh.core.exceptions import BuiltinArgError, LexError
from msh.core.tokenizer import continuation_prefix, expand_line

logger = logging.getLogger(__name__)


def resolve(ctx: Context, words: list[str], out: TextIO | None = None, err: TextIO | None = None) -> Action:
    """Map expanded words to an Action.

    Builtin argument errors are reported on `err` and resolve to Continue;
    they never fall through to external execution.
    """
    out = out or sys.stdout
    err = err or sys.stderr

    if not words:
        return Continue()

    try:
        action = command_registry.invoke(ctx, words, out)
    except BuiltinArgError as e:
        logger.debug(f"Builtin argument error: {e}")
        print(e, file=err)
        return Continue()

    if action is not None:
        return action

    logger.debug(f"No builtin named {words[0]!r}, forwarding to executor")
    return ExecuteExternal(tuple(words))


def interpret(ctx: Context, raw_line: str, out: TextIO | None = None, err: TextIO | None = None) -> Action:
    """Interpret one raw input line in the given context.

    Consumes any pending continuation buffer when the line completes it.
    """
    err = err or sys.stderr
    logger.debug(f"Raw line: {raw_line!r}")

    partial = continuation_prefix(raw_line)
    if partial is not None:
        return BufferContinuation(partial)

    full_line = ctx.take_buffer(raw_line)
    if not full_line.strip():
        return Continue()

    try:
        words = expand_line(full_line, ctx.session.getenv, str(ctx.session.home))
    except LexError as e:
        print(e, file=err)
        return Continue()

    return resolve(ctx, words, out, err)

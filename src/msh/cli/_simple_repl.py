"""
Plain REPL for terminals without prompt_toolkit support.
"""

from __future__ import annotations

import atexit
import logging
import readline
from pathlib import Path
from typing import Optional

from msh.cli.dispatch import handle_line
from msh.commands import command_registry
from msh.core.context import Context
from msh.core.exceptions import MshError

logger = logging.getLogger(__name__)

CONTINUATION_PROMPT = "... "


def get_prompt(ctx: Context) -> str:
    """Uncoloured prompt: registry size and cwd."""
    if ctx.has_buffer():
        return CONTINUATION_PROMPT
    return f"({ctx.registry.count()}) {ctx.session.display_cwd()}> "


class BuiltinCompleter:
    """readline completer for builtin names."""

    def __init__(self):
        self.matches: list[str] = []

    def complete(self, text: str, state: int) -> str | None:
        if state == 0:
            self.matches = [
                name for name in sorted(command_registry.get_completions())
                if name.startswith(text)
            ]
        if state < len(self.matches):
            return self.matches[state]
        return None


def setup_readline(history_file: Optional[Path]) -> None:
    """Configure readline for history and completion."""
    readline.set_completer(BuiltinCompleter().complete)
    readline.parse_and_bind("tab: complete")

    if history_file is None:
        return

    try:
        history_file.parent.mkdir(parents=True, exist_ok=True)
        if history_file.exists():
            readline.read_history_file(history_file)
    except OSError as e:
        logger.warning(f"History could not be loaded; error: {e}")
        return

    readline.set_history_length(1000)
    atexit.register(_save_history, history_file)


def _save_history(history_file: Path) -> None:
    try:
        readline.write_history_file(history_file)
    except OSError as e:
        logger.warning(f"Cannot save history file: {history_file} error: {e}")


def repl(ctx: Context, history_file: Optional[Path] = None):
    """Run the simple REPL.

    Args:
        ctx: The shell context to read and mutate.
        history_file: readline history file, None to skip persistence.
    """
    setup_readline(history_file)
    logger.info("Starting REPL")

    while True:
        try:
            line = input(get_prompt(ctx))
        except KeyboardInterrupt:
            print()
            ctx.discard_buffer()
            continue
        except EOFError:
            print()
            break

        try:
            if handle_line(ctx, line):
                break
        except KeyboardInterrupt:
            ctx.discard_buffer()
            print("\n[Interrupted]")
        except MshError as e:
            print(f"Error: {e}")

    logger.info("Loop is exiting")

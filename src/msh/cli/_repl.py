"""
Feature-rich REPL (Read-Eval-Print Loop) implementation using prompt_toolkit.

Provides command history, auto-suggestion, builtin and path completion,
and a prompt showing the registry size and working directory.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.styles import Style

from msh.cli.dispatch import handle_line
from msh.commands import command_registry
from msh.core.context import Context
from msh.core.exceptions import MshError

logger = logging.getLogger(__name__)

CONTINUATION_PROMPT = "... "


class ShellCompleter(Completer):
    """Completes builtin names on the first word and paths elsewhere."""

    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.paths = PathCompleter(
            get_paths=lambda: [str(self.ctx.session.cwd)],
            expanduser=True,
        )

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        words = text.split()
        on_first_word = not self.ctx.has_buffer() and (
            not words or (len(words) == 1 and not text[-1:].isspace())
        )

        if on_first_word:
            prefix = words[0] if words else ""
            for name, description in sorted(command_registry.get_completions().items()):
                if name.startswith(prefix):
                    yield Completion(
                        name,
                        start_position=-len(prefix),
                        display_meta=description,
                    )
            return

        word = "" if text[-1:].isspace() else words[-1]
        yield from self.paths.get_completions(Document(word, len(word)), complete_event)


def get_style() -> Style:
    """Get the prompt style."""
    return Style.from_dict({
        "count": "ansiblue",
        "cwd": "ansigreen",
    })


def get_prompt(ctx: Context) -> HTML | str:
    """Prompt showing registry size and cwd, or the continuation prompt."""
    if ctx.has_buffer():
        return CONTINUATION_PROMPT
    count = ctx.registry.count()
    cwd = html.escape(ctx.session.display_cwd())
    return HTML(f"<count>({count}) </count><cwd>{cwd}</cwd>> ")


def load_history(history_file: Optional[Path]) -> History:
    """Open the history file, falling back to in-memory history."""
    if history_file is None:
        return InMemoryHistory()
    try:
        history_file.parent.mkdir(parents=True, exist_ok=True)
        history_file.touch(exist_ok=True)
    except OSError as e:
        logger.warning(f"History could not be loaded; error: {e}")
        return InMemoryHistory()
    logger.info(f"History file: {history_file}")
    return FileHistory(str(history_file))


def repl(ctx: Context, history_file: Optional[Path] = None):
    """Run the interactive REPL.

    Features:
        - Command history (persistent across sessions)
        - Tab completion for builtins and paths
        - Ctrl+C to cancel input (and any pending continuation), Ctrl+D to exit

    Args:
        ctx: The shell context to read and mutate.
        history_file: Where to persist history; None keeps it in memory.
    """
    session: PromptSession = PromptSession(
        history=load_history(history_file),
        completer=ShellCompleter(ctx),
        auto_suggest=AutoSuggestFromHistory(),
        style=get_style(),
        complete_while_typing=False,
    )

    logger.info("Starting REPL")

    while True:
        try:
            line = session.prompt(get_prompt(ctx))
        except KeyboardInterrupt:
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

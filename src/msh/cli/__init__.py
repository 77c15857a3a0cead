"""
CLI module for the msh package.

Provides the interactive REPL drivers and the action dispatcher.
"""

from msh.cli._repl import repl
from msh.cli._simple_repl import repl as simple_repl
from msh.cli.dispatch import apply_action, handle_line

__all__ = [
    "repl",
    "simple_repl",
    "apply_action",
    "handle_line",
]

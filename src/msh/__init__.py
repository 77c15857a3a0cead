"""
msh - broadcast shell

An interactive shell that keeps a registry of working directories and runs
each external command in all of them at once.

Example usage:
    from msh.core import Context
    from msh.core.resolver import interpret
    from msh.cli.dispatch import apply_action

    ctx = Context()
    ctx.registry.register("/srv/app-a")
    ctx.registry.register("/srv/app-b")

    apply_action(ctx, interpret(ctx, "git status --short"))
"""

__version__ = "0.1.0"

from msh.core import (
    Context,
    DirectoryRegistry,
    MshError,
    SessionState,
    execute,
    expand,
    tokenize,
)

__all__ = [
    "__version__",
    "Context",
    "DirectoryRegistry",
    "SessionState",
    "MshError",
    "tokenize",
    "expand",
    "execute",
]

"""
Exception classes for the msh core.
"""

from __future__ import annotations


class MshError(Exception):
    """Base exception for shell errors."""


class LexError(MshError):
    """Malformed quoting in a single logical line."""


class UnterminatedQuoteError(LexError):
    """End of input reached inside a quoted region."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unterminated {kind} quote")


class BuiltinArgError(MshError):
    """Wrong arity or unknown flag for a builtin command."""

    def __init__(self, name: str, message: str, usage: str | None = None):
        self.name = name
        self.usage = usage
        text = f"{name}: {message}"
        if usage:
            text += f"\nusage: {usage}"
        super().__init__(text)


class PathError(MshError):
    """A path could not be canonicalized."""


class SpawnError(MshError):
    """An external process could not be started for a target."""


class RegistryFileError(MshError):
    """A registry file could not be read."""

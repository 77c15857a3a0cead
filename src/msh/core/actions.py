"""
Actions produced by interpreting one logical line.

Exactly one Action results from each call to the resolver. The REPL driver
applies it to the context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class RegistryOp(str, Enum):
    """How a MutateRegistry action changes the registry."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"  # clear, then add


@dataclass(frozen=True)
class Continue:
    """Nothing left to do for this line."""


@dataclass(frozen=True)
class BufferContinuation:
    """Store a partial line until the next line completes it."""

    partial: str


@dataclass(frozen=True)
class SetWorkingDir:
    path: str


@dataclass(frozen=True)
class SetEnv:
    name: str
    value: str


@dataclass(frozen=True)
class UnsetEnv:
    name: str


@dataclass(frozen=True)
class MutateRegistry:
    op: RegistryOp
    paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class LoadRegistryFromFile:
    path: str


@dataclass(frozen=True)
class PrintRegistryDump:
    pass


@dataclass(frozen=True)
class ExecuteExternal:
    """Broadcast argv to every registered directory."""

    argv: tuple[str, ...]


@dataclass(frozen=True)
class Exit:
    message: Optional[str] = None


Action = Union[
    Continue,
    BufferContinuation,
    SetWorkingDir,
    SetEnv,
    UnsetEnv,
    MutateRegistry,
    LoadRegistryFromFile,
    PrintRegistryDump,
    ExecuteExternal,
    Exit,
]

"""
Core module for the msh package.

Provides the tokenizer, the directory registry, actions and the broadcast
executor. The resolver lives in msh.core.resolver.
"""

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
from msh.core.exceptions import (
    BuiltinArgError,
    LexError,
    MshError,
    PathError,
    RegistryFileError,
    SpawnError,
    UnterminatedQuoteError,
)
from msh.core.executor import BroadcastResult, TargetResult, execute
from msh.core.registry import (
    DirectoryRegistry,
    read_registry_file,
    register_paths,
    unregister_paths,
)
from msh.core.session import SessionState
from msh.core.tokenizer import expand, expand_line, tokenize

__all__ = [
    # Actions
    "Action",
    "BufferContinuation",
    "Continue",
    "ExecuteExternal",
    "Exit",
    "LoadRegistryFromFile",
    "MutateRegistry",
    "PrintRegistryDump",
    "RegistryOp",
    "SetEnv",
    "SetWorkingDir",
    "UnsetEnv",
    # State
    "Context",
    "SessionState",
    "DirectoryRegistry",
    # Exceptions
    "MshError",
    "LexError",
    "UnterminatedQuoteError",
    "BuiltinArgError",
    "PathError",
    "SpawnError",
    "RegistryFileError",
    # Operations
    "tokenize",
    "expand",
    "expand_line",
    "execute",
    "BroadcastResult",
    "TargetResult",
    "read_registry_file",
    "register_paths",
    "unregister_paths",
]

"""
Shell context: pending input, directory registry and session state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from msh.core.registry import DirectoryRegistry
from msh.core.session import SessionState

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """Everything that persists between REPL iterations."""

    session: SessionState = field(default_factory=SessionState)
    registry: DirectoryRegistry = field(default_factory=DirectoryRegistry)
    workers: int | None = None
    buffer: str = ""
    # set even when the pushed text is empty, e.g. a lone backslash
    pending: bool = False

    def push_buffer(self, partial: str) -> None:
        logger.debug(f"Pushing line to buffer: {partial!r}")
        self.buffer += partial
        self.pending = True

    def take_buffer(self, line: str) -> str:
        """Join the pending buffer with `line` and clear the buffer."""
        full_line = self.buffer + line
        self.buffer = ""
        self.pending = False
        logger.debug(f"Buffer taken, full line: {full_line!r}")
        return full_line

    def has_buffer(self) -> bool:
        return self.pending

    def discard_buffer(self) -> None:
        self.buffer = ""
        self.pending = False

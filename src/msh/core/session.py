"""
Explicit session state for the shell.

Working directory and environment changes made from the shell live here
instead of on the process, so every command sees the same state and tests
can build isolated sessions.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from msh.core.exceptions import PathError

logger = logging.getLogger(__name__)


def canonicalize(path: str | Path, base: Path) -> Path:
    """Resolve `path` against `base`, following symlinks.

    Raises:
        PathError: If the path does not exist or cannot be resolved.
    """
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = base / candidate
    try:
        return candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as e:
        raise PathError(_describe_os_error(e)) from e


def _describe_os_error(err: Exception) -> str:
    if isinstance(err, OSError) and err.strerror:
        return err.strerror
    return str(err)


@dataclass
class SessionState:
    """Working directory, home and environment overlay for one session."""

    cwd: Path = field(default_factory=Path.cwd)
    home: Path = field(default_factory=Path.home)
    base_env: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    # None marks a variable deleted during this session
    overlay: dict[str, Optional[str]] = field(default_factory=dict)

    def getenv(self, name: str) -> Optional[str]:
        if name in self.overlay:
            return self.overlay[name]
        return self.base_env.get(name)

    def setenv(self, name: str, value: str) -> None:
        logger.debug(f"Setting env {name}={value!r}")
        self.overlay[name] = value

    def unsetenv(self, name: str) -> None:
        logger.debug(f"Removing env {name}")
        self.overlay[name] = None

    def environ(self) -> dict[str, str]:
        """Merged environment for spawned processes."""
        env = dict(self.base_env)
        for name, value in self.overlay.items():
            if value is None:
                env.pop(name, None)
            else:
                env[name] = value
        return env

    def chdir(self, path: str | Path) -> Path:
        """Change the session working directory.

        Raises:
            PathError: If the target does not exist or is not a directory.
        """
        target = canonicalize(path, self.cwd)
        if not target.is_dir():
            raise PathError(f"Not a directory: {target}")
        logger.debug(f"Changing directory: {self.cwd} -> {target}")
        self.cwd = target
        return target

    def display_cwd(self) -> str:
        """Current directory with the home prefix shown as ~."""
        cwd = str(self.cwd)
        home = str(self.home).rstrip(os.sep)
        # no prefix for a root home
        if not home:
            return cwd
        if cwd == home or cwd.startswith(home + os.sep):
            return "~" + cwd[len(home):]
        return cwd

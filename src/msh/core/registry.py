"""
Directory registry for broadcast commands.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from msh.core.exceptions import PathError, RegistryFileError
from msh.core.session import canonicalize

logger = logging.getLogger(__name__)


class DirectoryRegistry:
    """Set of canonical directory paths that commands run against."""

    def __init__(self):
        self._dirs: set[Path] = set()

    def register(self, path: str | Path, base: Path | None = None) -> tuple[Path, bool]:
        """Add a path to the registry.

        Args:
            path: Path to register, relative paths resolve against `base`.
            base: Directory for relative paths (default: process cwd).

        Returns:
            Tuple of (canonical path, True if newly inserted).

        Raises:
            PathError: If the path does not exist or cannot be resolved.
        """
        real_path = canonicalize(path, base or Path.cwd())
        is_new = real_path not in self._dirs
        self._dirs.add(real_path)
        return real_path, is_new

    def unregister(self, path: str | Path, base: Path | None = None) -> tuple[Path, bool]:
        """Remove a path from the registry.

        Returns:
            Tuple of (canonical path, True if it was registered).

        Raises:
            PathError: If the path does not exist or cannot be resolved.
        """
        real_path = canonicalize(path, base or Path.cwd())
        was_present = real_path in self._dirs
        self._dirs.discard(real_path)
        return real_path, was_present

    def clear(self) -> None:
        self._dirs.clear()

    def count(self) -> int:
        return len(self._dirs)

    def dump(self) -> str:
        """Human readable listing of the registry."""
        lines = ["Registered directories:"]
        lines.extend(str(p) for p in self)
        return "\n".join(lines) + "\n"

    def __contains__(self, path: object) -> bool:
        return path in self._dirs

    def __iter__(self) -> Iterator[Path]:
        return iter(sorted(self._dirs))

    def __len__(self) -> int:
        return len(self._dirs)


def read_registry_file(name: str | Path, base: Path | None = None) -> list[str]:
    """Read a whitespace-separated list of directories.

    No quoting is supported; every whitespace-separated word is one path.

    Raises:
        RegistryFileError: If the file cannot be read.
    """
    path = Path(name)
    if base is not None and not path.is_absolute():
        path = base / path
    logger.debug(f"Reading registry file: {path}")
    try:
        contents = path.read_text()
    except (OSError, ValueError) as e:
        raise RegistryFileError(f"Cannot read registry file {name}: {e}") from e
    return contents.split()


def register_paths(
    registry: DirectoryRegistry,
    paths: Iterable[str],
    base: Path | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Register each path, reporting per path.

    Failures are reported and do not stop the remaining paths.

    Returns:
        Number of newly registered paths.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    added = 0
    for path in paths:
        try:
            real_path, is_new = registry.register(path, base)
        except PathError as e:
            print(f"Cannot register path {path}: {e}", file=err)
            continue
        if is_new:
            added += 1
            print(f"Registered new path: {real_path}", file=out)
        else:
            print(f"Already Registered: {real_path}", file=out)
    return added


def unregister_paths(
    registry: DirectoryRegistry,
    paths: Iterable[str],
    base: Path | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Unregister each path, reporting per path.

    Returns:
        Number of removed paths.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    removed = 0
    for path in paths:
        try:
            real_path, was_present = registry.unregister(path, base)
        except PathError as e:
            print(f"Cannot unregister path {path}: {e}", file=err)
            continue
        if was_present:
            removed += 1
            print(f"Removed path from registry: {real_path}", file=out)
        else:
            print(f"Path not registered, cannot remove: {real_path}", file=out)
    return removed

"""
Broadcast execution of external commands.

One command line runs concurrently in every registered directory on a
bounded thread pool. With an empty registry the command runs once in the
session's working directory, which is not added to the registry.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Mapping, Optional, Sequence, TextIO

from pydantic import BaseModel

from msh.core.exceptions import SpawnError
from msh.core.registry import DirectoryRegistry
from msh.core.session import SessionState

logger = logging.getLogger(__name__)


class TargetResult(BaseModel):
    """Outcome of running a command in one directory."""
    path: Path
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @property
    def spawned(self) -> bool:
        return self.error is None

    @property
    def ok(self) -> bool:
        return self.spawned and self.returncode == 0


class BroadcastResult(BaseModel):
    """Outcome of one broadcast across all targets."""
    argv: list[str]
    results: list[TargetResult]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failed(self) -> list[TargetResult]:
        return [r for r in self.results if not r.ok]


def run_in_directory(
    argv: Sequence[str],
    path: Path,
    env: Mapping[str, str] | None = None,
) -> TargetResult:
    """Run argv with `path` as working directory, capturing its output.

    Raises:
        SpawnError: If the process could not be started.
    """
    try:
        proc = subprocess.run(
            list(argv),
            cwd=path,
            env=dict(env) if env is not None else None,
            stdin=subprocess.DEVNULL,
            capture_output=True,
        )
    except (OSError, ValueError) as e:
        raise SpawnError(str(e)) from e

    return TargetResult(
        path=path,
        returncode=proc.returncode,
        stdout=proc.stdout.decode(errors="replace"),
        stderr=proc.stderr.decode(errors="replace"),
    )


def _run_target(argv: Sequence[str], path: Path, env: Mapping[str, str]) -> TargetResult:
    try:
        return run_in_directory(argv, path, env)
    except SpawnError as e:
        return TargetResult(path=path, error=str(e))


def execute(
    argv: Sequence[str],
    registry: DirectoryRegistry,
    session: SessionState | None = None,
    workers: int | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> BroadcastResult:
    """Run argv in every registered directory and print per-target output.

    Each target prints at most one block: its path followed by stdout, or
    a diagnostic on `err` when the process could not be started. Blocks
    appear in completion order.

    Args:
        argv: Command and arguments; must not be empty.
        registry: Directories to run in. Not modified.
        session: Supplies the fallback directory and the environment.
        workers: Maximum concurrent processes (default: CPU count).

    Returns:
        BroadcastResult with one TargetResult per target.
    """
    if not argv:
        raise ValueError("execute() requires a non-empty argv")

    session = session or SessionState()
    out = out or sys.stdout
    err = err or sys.stderr
    logger.debug(f"Execute command: {list(argv)!r}")

    targets = list(registry)
    if not targets:
        logger.debug(f"No registered directories, executing against {session.cwd}")
        targets = [session.cwd]

    env = session.environ()
    pool_size = max(1, min(workers or os.cpu_count() or 1, len(targets)))
    results = []

    with ThreadPoolExecutor(max_workers=pool_size) as pool:
        futures = [pool.submit(_run_target, argv, path, env) for path in targets]
        for future in as_completed(futures):
            result = future.result()
            results.append(result)
            _report(result, out, err)

    broadcast = BroadcastResult(argv=list(argv), results=results)
    if not broadcast.ok:
        logger.info(f"{len(broadcast.failed)}/{len(results)} targets failed for {argv[0]}")
    return broadcast


def _report(result: TargetResult, out: TextIO, err: TextIO) -> None:
    if not result.spawned:
        print(
            f"Could not execute process on dir: {result.path}, failed with error: {result.error}",
            file=err,
        )
        return

    if result.stderr:
        logger.debug(f"{result.path} stderr: {result.stderr.rstrip()}")
    if result.returncode != 0:
        logger.debug(f"{result.path} exited with status {result.returncode}")
    if result.stdout.strip():
        print(f"{result.path}:\n{result.stdout}", file=out)

#!/usr/bin/env python3
"""
Tests for broadcast execution.

Commands run the current Python interpreter so the tests do not depend on
any particular shell utilities.
"""

import os
import sys
from io import StringIO

import pytest

from msh.core.executor import BroadcastResult, execute, run_in_directory
from msh.core.exceptions import SpawnError
from msh.core.registry import DirectoryRegistry
from msh.core.session import SessionState


PRINT_CWD = [sys.executable, "-c", "import os; print(os.getcwd())"]


@pytest.fixture
def base(tmp_path):
    return tmp_path.resolve()


@pytest.fixture
def session(base):
    return SessionState(cwd=base, home=base)


@pytest.fixture
def streams():
    return StringIO(), StringIO()


def make_dirs(base, *names):
    paths = []
    for name in names:
        path = base / name
        path.mkdir()
        paths.append(path)
    return paths


# ============================================================================
# execute() Tests
# ============================================================================

class TestExecute:
    """Tests for running one command in every registered directory."""

    def test_empty_registry_runs_in_cwd(self, session, base, streams):
        """With nothing registered the command runs once in the session cwd."""
        out, err = streams
        registry = DirectoryRegistry()

        result = execute(PRINT_CWD, registry, session, out=out, err=err)

        assert len(result.results) == 1
        assert result.results[0].path == base
        assert out.getvalue() == f"{base}:\n{base}\n\n"
        assert registry.count() == 0

    def test_runs_in_every_directory(self, session, base, streams):
        out, err = streams
        registry = DirectoryRegistry()
        dirs = make_dirs(base, "a", "b", "c")
        for d in dirs:
            registry.register(d)

        result = execute(PRINT_CWD, registry, session, out=out, err=err)

        assert result.ok
        assert sorted(r.path for r in result.results) == dirs
        for d in dirs:
            assert f"{d}:\n{d}\n" in out.getvalue()
        assert err.getvalue() == ""
        assert registry.count() == 3

    def test_removed_directory_does_not_stop_others(self, session, base, streams):
        """One vanished target gives one diagnostic; the others still run."""
        out, err = streams
        registry = DirectoryRegistry()
        dirs = make_dirs(base, "a", "b", "c", "gone")
        for d in dirs:
            registry.register(d)
        dirs[3].rmdir()

        result = execute(PRINT_CWD, registry, session, out=out, err=err)

        assert len(result.results) == 4
        assert [r.path for r in result.failed] == [dirs[3]]
        assert not result.ok
        assert err.getvalue().count("Could not execute process on dir") == 1
        assert str(dirs[3]) in err.getvalue()
        for d in dirs[:3]:
            assert f"{d}:\n{d}\n" in out.getvalue()

    def test_missing_program(self, session, base, streams):
        out, err = streams
        registry = DirectoryRegistry()
        for d in make_dirs(base, "a", "b"):
            registry.register(d)

        result = execute(["msh-no-such-program-xyz"], registry, session, out=out, err=err)

        assert all(not r.spawned for r in result.results)
        assert err.getvalue().count("Could not execute process on dir") == 2
        assert out.getvalue() == ""

    def test_empty_output_prints_nothing(self, session, streams):
        out, err = streams
        execute([sys.executable, "-c", "pass"], DirectoryRegistry(), session, out=out, err=err)
        assert out.getvalue() == ""
        assert err.getvalue() == ""

    def test_exit_status_recorded(self, session, streams):
        out, err = streams
        argv = [sys.executable, "-c", "import sys; print('x'); sys.exit(3)"]

        result = execute(argv, DirectoryRegistry(), session, out=out, err=err)

        assert result.results[0].returncode == 3
        assert result.results[0].spawned
        assert not result.ok
        assert "x" in out.getvalue()
        assert err.getvalue() == ""

    def test_stderr_captured_not_printed(self, session, streams):
        out, err = streams
        argv = [sys.executable, "-c", "import sys; sys.stderr.write('oops')"]

        result = execute(argv, DirectoryRegistry(), session, out=out, err=err)

        assert result.results[0].stderr == "oops"
        assert err.getvalue() == ""

    def test_single_worker_runs_all(self, session, base, streams):
        out, err = streams
        registry = DirectoryRegistry()
        for d in make_dirs(base, "a", "b", "c"):
            registry.register(d)

        result = execute(PRINT_CWD, registry, session, workers=1, out=out, err=err)

        assert len(result.results) == 3
        assert result.ok

    def test_session_environment(self, base, streams):
        out, err = streams
        session = SessionState(cwd=base, home=base, base_env=dict(os.environ, GONE="1"))
        session.setenv("MSH_TEST_VAR", "hello")
        session.unsetenv("GONE")
        argv = [
            sys.executable,
            "-c",
            "import os; print(os.environ.get('MSH_TEST_VAR'), os.environ.get('GONE', 'unset'))",
        ]

        execute(argv, DirectoryRegistry(), session, out=out, err=err)

        assert "hello unset" in out.getvalue()

    def test_empty_argv_is_programming_error(self, session):
        with pytest.raises(ValueError):
            execute([], DirectoryRegistry(), session)

    def test_result_model(self, session, streams):
        out, err = streams
        result = execute(PRINT_CWD, DirectoryRegistry(), session, out=out, err=err)
        assert isinstance(result, BroadcastResult)
        assert result.argv == PRINT_CWD
        assert result.failed == []


class TestRunInDirectory:
    """Tests for the single-target runner."""

    def test_captures_stdout(self, base):
        result = run_in_directory(PRINT_CWD, base)
        assert result.stdout.strip() == str(base)
        assert result.returncode == 0

    def test_spawn_error(self, base):
        with pytest.raises(SpawnError):
            run_in_directory(PRINT_CWD, base / "missing")

#!/usr/bin/env python3
"""
Tests for session state and the shell context.
"""

import os
from pathlib import Path

import pytest

from msh.core.context import Context
from msh.core.exceptions import PathError
from msh.core.session import SessionState, canonicalize


# ============================================================================
# SessionState Tests
# ============================================================================

class TestEnvironment:
    """Tests for the environment overlay."""

    def test_reads_base_env(self):
        session = SessionState(base_env={"A": "1"})
        assert session.getenv("A") == "1"
        assert session.getenv("B") is None

    def test_setenv_overrides(self):
        session = SessionState(base_env={"A": "1"})
        session.setenv("A", "2")
        assert session.getenv("A") == "2"

    def test_unsetenv_hides_base(self):
        session = SessionState(base_env={"A": "1"})
        session.unsetenv("A")
        assert session.getenv("A") is None

    def test_environ_merges(self):
        session = SessionState(base_env={"A": "1", "B": "2"})
        session.setenv("C", "3")
        session.unsetenv("B")
        assert session.environ() == {"A": "1", "C": "3"}

    def test_process_environment_untouched(self, monkeypatch):
        monkeypatch.delenv("MSH_SESSION_TEST", raising=False)
        session = SessionState()
        session.setenv("MSH_SESSION_TEST", "x")
        assert "MSH_SESSION_TEST" not in os.environ

    def test_sessions_are_isolated(self):
        first = SessionState(base_env={})
        second = SessionState(base_env={})
        first.setenv("A", "1")
        assert second.getenv("A") is None


class TestChdir:
    """Tests for changing the session working directory."""

    def test_chdir_relative(self, tmp_path):
        base = tmp_path.resolve()
        (base / "sub").mkdir()
        session = SessionState(cwd=base)

        assert session.chdir("sub") == base / "sub"
        assert session.cwd == base / "sub"

    def test_chdir_parent(self, tmp_path):
        base = tmp_path.resolve()
        (base / "sub").mkdir()
        session = SessionState(cwd=base / "sub")
        session.chdir("..")
        assert session.cwd == base

    def test_chdir_missing(self, tmp_path):
        session = SessionState(cwd=tmp_path)
        with pytest.raises(PathError):
            session.chdir("missing")
        assert session.cwd == tmp_path

    def test_chdir_file(self, tmp_path):
        (tmp_path / "file.txt").write_text("x")
        session = SessionState(cwd=tmp_path)
        with pytest.raises(PathError):
            session.chdir("file.txt")

    def test_process_cwd_untouched(self, tmp_path):
        before = os.getcwd()
        session = SessionState(cwd=tmp_path)
        (tmp_path / "sub").mkdir()
        session.chdir("sub")
        assert os.getcwd() == before


class TestDisplayCwd:
    """Tests for the prompt form of the cwd."""

    def test_home_itself(self):
        session = SessionState(cwd=Path("/home/u"), home=Path("/home/u"))
        assert session.display_cwd() == "~"

    def test_under_home(self):
        session = SessionState(cwd=Path("/home/u/src"), home=Path("/home/u"))
        assert session.display_cwd() == "~/src"

    def test_sibling_with_common_prefix(self):
        session = SessionState(cwd=Path("/home/user2"), home=Path("/home/u"))
        assert session.display_cwd() == "/home/user2"

    def test_outside_home(self):
        session = SessionState(cwd=Path("/tmp"), home=Path("/home/u"))
        assert session.display_cwd() == "/tmp"

    def test_root_home_gets_no_prefix(self):
        session = SessionState(cwd=Path("/tmp/work"), home=Path("/"))
        assert session.display_cwd() == "/tmp/work"


def test_canonicalize_missing(tmp_path):
    with pytest.raises(PathError):
        canonicalize("nope", tmp_path)


def test_canonicalize_null_byte(tmp_path):
    with pytest.raises(PathError):
        canonicalize("bad\x00name", tmp_path)


# ============================================================================
# Context Tests
# ============================================================================

class TestContextBuffer:
    """Tests for the pending continuation buffer."""

    def test_starts_empty(self):
        ctx = Context()
        assert not ctx.has_buffer()

    def test_push_and_take(self):
        ctx = Context()
        ctx.push_buffer("echo a ")
        ctx.push_buffer("b ")
        assert ctx.has_buffer()
        assert ctx.take_buffer("c") == "echo a b c"
        assert not ctx.has_buffer()

    def test_take_without_buffer(self):
        ctx = Context()
        assert ctx.take_buffer("ls") == "ls"

    def test_discard(self):
        ctx = Context()
        ctx.push_buffer("x")
        ctx.discard_buffer()
        assert ctx.take_buffer("y") == "y"

    def test_empty_push_is_pending(self):
        ctx = Context()
        ctx.push_buffer("")
        assert ctx.has_buffer()
        assert ctx.take_buffer("ls") == "ls"
        assert not ctx.has_buffer()

    def test_discard_clears_pending(self):
        ctx = Context()
        ctx.push_buffer("")
        ctx.discard_buffer()
        assert not ctx.has_buffer()

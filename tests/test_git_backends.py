"""Tests for tools.git_backends."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from core.exceptions import GitBackendError, TmuxstarError
from tools.git_backends import (
    GitPythonBackend,
    GitResult,
    SubprocessGitBackend,
    create_git_backend,
    decode_output,
)


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run, recording calls and returning a scripted result."""
    calls = []
    outcome = {"returncode": 0, "stdout": b"", "raises": None}

    def _run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        if outcome["raises"] is not None:
            raise outcome["raises"]
        return SimpleNamespace(returncode=outcome["returncode"], stdout=outcome["stdout"], stderr=b"")

    monkeypatch.setattr(subprocess, "run", _run)
    return SimpleNamespace(calls=calls, outcome=outcome)


class TestGitResult:

    def test_value_strips_output(self):
        assert GitResult(ok=True, stdout="  main\n").value() == "main"

    def test_value_of_empty_output_is_none(self):
        assert GitResult(ok=True, stdout="\n").value() is None

    def test_value_of_failure_is_none(self):
        assert GitResult(ok=False, stdout="main\n", reason="exit status 1").value() is None


class TestSubprocessGitBackend:

    def test_targets_path_with_dash_c(self, fake_run):
        SubprocessGitBackend().run("/work/repo", ["status", "--porcelain"])

        cmd, kwargs = fake_run.calls[0]
        assert cmd == ["git", "-C", "/work/repo", "status", "--porcelain"]
        assert "cwd" not in kwargs
        assert not kwargs.get("shell", False)
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["timeout"] is None

    def test_success_keeps_raw_stdout(self, fake_run):
        fake_run.outcome["stdout"] = b" M app.py\n"
        result = SubprocessGitBackend().run("/repo", ["status", "--porcelain"])

        assert result == GitResult(ok=True, stdout=" M app.py\n")

    def test_non_zero_exit(self, fake_run):
        fake_run.outcome["returncode"] = 128
        result = SubprocessGitBackend().run("/tmp", ["rev-parse", "--show-toplevel"])

        assert result.ok is False
        assert result.reason == "exit status 128"

    def test_missing_binary(self, fake_run):
        fake_run.outcome["raises"] = FileNotFoundError(2, "No such file or directory", "git")
        result = SubprocessGitBackend().run("/repo", ["status", "--porcelain"])

        assert result.ok is False
        assert "could not run git" in result.reason

    def test_timeout(self, fake_run):
        fake_run.outcome["raises"] = subprocess.TimeoutExpired(["git"], 2)
        result = SubprocessGitBackend(timeout=2).run("/repo", ["status", "--porcelain"])

        assert result.ok is False
        assert "timed out" in result.reason
        assert fake_run.calls[0][1]["timeout"] == 2

    def test_invalid_utf8_is_replaced(self, fake_run):
        fake_run.outcome["stdout"] = b"?? caf\xe9.txt\n"
        result = SubprocessGitBackend().run("/repo", ["status", "--porcelain"])

        assert result.ok is True
        assert result.stdout == "?? caf�.txt\n"


def test_decode_output_is_lossy():
    assert decode_output(b"main\xff") == "main�"


class TestGitPythonBackend:

    @pytest.fixture
    def git_cmd(self):
        return pytest.importorskip("git.cmd")

    def test_runs_through_gitpython(self, git_cmd, monkeypatch):
        seen = {}

        def _execute(self, command, **kwargs):
            seen["command"] = command
            seen.update(kwargs)
            return 0, b"main\n", b""

        monkeypatch.setattr(git_cmd.Git, "execute", _execute)
        result = GitPythonBackend(timeout=3).run("/repo", ["rev-parse", "--abbrev-ref", "HEAD"])

        assert result == GitResult(ok=True, stdout="main\n")
        assert seen["command"] == ["git", "-C", "/repo", "rev-parse", "--abbrev-ref", "HEAD"]
        assert seen["with_exceptions"] is False
        assert seen["kill_after_timeout"] == 3

    def test_non_zero_exit(self, git_cmd, monkeypatch):
        monkeypatch.setattr(git_cmd.Git, "execute", lambda self, command, **kwargs: (128, b"", b"fatal"))
        result = GitPythonBackend().run("/tmp", ["rev-parse", "--is-inside-work-tree"])

        assert result.ok is False
        assert result.reason == "exit status 128"

    def test_spawn_failure(self, git_cmd, monkeypatch):
        from git.exc import GitCommandNotFound

        def _execute(self, command, **kwargs):
            raise GitCommandNotFound(command, "not found")

        monkeypatch.setattr(git_cmd.Git, "execute", _execute)
        result = GitPythonBackend().run("/repo", ["status", "--porcelain"])

        assert result.ok is False


class TestCreateGitBackend:

    def test_default_is_subprocess(self):
        assert isinstance(create_git_backend(), SubprocessGitBackend)

    def test_name_is_case_insensitive(self):
        backend = create_git_backend("GitPython", timeout=1.5)

        assert isinstance(backend, GitPythonBackend)
        assert backend.timeout == 1.5

    def test_unknown_backend(self):
        with pytest.raises(GitBackendError, match="Unknown git backend 'svn'"):
            create_git_backend("svn")

    def test_error_is_a_tmuxstar_error(self):
        with pytest.raises(TmuxstarError):
            create_git_backend("hg")

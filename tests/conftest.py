"""Shared fixtures: a scripted git backend and an isolated environment."""

from __future__ import annotations

import os
from typing import Dict, Optional, Sequence, Tuple

import pytest

from tools.git_backends import GitBackend, GitResult

IS_WORK_TREE = ("rev-parse", "--is-inside-work-tree")
SHOW_TOPLEVEL = ("rev-parse", "--show-toplevel")
ABBREV_REF = ("rev-parse", "--abbrev-ref", "HEAD")
DESCRIBE = ("describe", "--contains", "--all", "HEAD")
STATUS = ("status", "--porcelain")

NOT_A_REPO = GitResult(ok=False, reason="exit status 128")


class FakeGitBackend(GitBackend):
    """Answers git queries from a table keyed by argument tuple."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], GitResult]] = None):
        super().__init__()
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def run(self, path: str, args: Sequence[str]) -> GitResult:
        self.calls.append((path, tuple(args)))
        return self.responses.get(tuple(args), NOT_A_REPO)

    def called(self, args: Tuple[str, ...]) -> bool:
        return any(call_args == args for _path, call_args in self.calls)


def repo_responses(
    toplevel: str = "/home/dev/myproj",
    branch: Optional[str] = "main",
    status: str = "",
    describe: Optional[str] = None,
) -> Dict[Tuple[str, ...], GitResult]:
    """Responses for a working tree; None leaves a query failing."""
    responses = {
        IS_WORK_TREE: GitResult(ok=True, stdout="true\n"),
        SHOW_TOPLEVEL: GitResult(ok=True, stdout=f"{toplevel}\n"),
        STATUS: GitResult(ok=True, stdout=status),
    }
    if branch is not None:
        responses[ABBREV_REF] = GitResult(ok=True, stdout=f"{branch}\n")
    if describe is not None:
        responses[DESCRIBE] = GitResult(ok=True, stdout=f"{describe}\n")
    return responses


@pytest.fixture
def make_backend():
    """Factory for FakeGitBackend; keyword arguments go to repo_responses."""

    def _make(**kwargs) -> FakeGitBackend:
        return FakeGitBackend(repo_responses(**kwargs))

    return _make


@pytest.fixture
def no_repo_backend():
    """A backend for which every git query fails."""
    return FakeGitBackend()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's config file and TMUXSTAR_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("TMUXSTAR_"):
            monkeypatch.delenv(name, raising=False)
    config_path = tmp_path / "tmuxstar" / "config.toml"
    monkeypatch.setenv("TMUXSTAR_CONFIG", str(config_path))
    return config_path

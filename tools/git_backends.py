"""Git backends: the one place that actually runs the git binary."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from core.exceptions import GitBackendError

logger = logging.getLogger(__name__)


def decode_output(raw: bytes) -> str:
    """Decode git output as UTF-8, replacing undecodable bytes."""
    return raw.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class GitResult:
    """Outcome of one git invocation."""

    ok: bool
    stdout: str = ""
    reason: Optional[str] = None

    def value(self) -> Optional[str]:
        """Stripped stdout of a successful call, or None if failed or empty."""
        if not self.ok:
            return None
        text = self.stdout.strip()
        return text or None


class GitBackend(ABC):
    """Abstract runner for read-only git queries."""

    def __init__(self, executable: str = "git", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def command(self, path: str, args: Sequence[str]) -> list[str]:
        """Full argument list; the path is always targeted with ``-C``."""
        return [self.executable, "-C", str(path), *args]

    @abstractmethod
    def run(self, path: str, args: Sequence[str]) -> GitResult:
        """
        Run ``git -C path <args>``.

        Args:
            path: Directory the query is about.
            args: Git arguments after ``-C path``.

        Returns:
            GitResult; implementations never raise for git failures.
        """
        pass


class SubprocessGitBackend(GitBackend):
    """Runs git through ``subprocess.run`` with an argument list."""

    def run(self, path: str, args: Sequence[str]) -> GitResult:
        cmd = self.command(path, args)
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return GitResult(ok=False, reason=f"timed out after {self.timeout}s")
        except (OSError, subprocess.SubprocessError) as exc:
            return GitResult(ok=False, reason=f"could not run {self.executable}: {exc}")

        stdout = decode_output(result.stdout)
        if result.returncode != 0:
            return GitResult(ok=False, stdout=stdout, reason=f"exit status {result.returncode}")
        return GitResult(ok=True, stdout=stdout)


class GitPythonBackend(GitBackend):
    """Runs git through GitPython's command wrapper."""

    def run(self, path: str, args: Sequence[str]) -> GitResult:
        try:
            # GitPython probes for the git binary on import
            from git.cmd import Git
            from git.exc import GitError
        except ImportError as exc:
            return GitResult(ok=False, reason=f"GitPython unavailable: {exc}")

        cmd = self.command(path, args)
        try:
            status, stdout, _stderr = Git().execute(
                cmd,
                with_extended_output=True,
                with_exceptions=False,
                stdout_as_string=False,
                strip_newline_in_stdout=False,
                kill_after_timeout=self.timeout,
            )
        except (GitError, OSError) as exc:
            return GitResult(ok=False, reason=f"could not run {self.executable}: {exc}")

        text = decode_output(stdout) if isinstance(stdout, bytes) else str(stdout)
        if status != 0:
            return GitResult(ok=False, stdout=text, reason=f"exit status {status}")
        return GitResult(ok=True, stdout=text)


BACKENDS = {
    "subprocess": SubprocessGitBackend,
    "gitpython": GitPythonBackend,
}


def create_git_backend(name: str = "subprocess", timeout: Optional[float] = None) -> GitBackend:
    """
    Create a git backend by name.

    Args:
        name: One of ``BACKENDS``.
        timeout: Seconds before a single git call is abandoned; None waits forever.

    Returns:
        GitBackend instance.

    Raises:
        GitBackendError: If the name is unknown.
    """
    try:
        backend_cls = BACKENDS[name.lower()]
    except KeyError:
        raise GitBackendError(
            f"Unknown git backend '{name}'. Choose one of: {', '.join(BACKENDS)}"
        ) from None
    logger.debug("using %s git backend (timeout=%s)", name, timeout)
    return backend_cls(timeout=timeout)

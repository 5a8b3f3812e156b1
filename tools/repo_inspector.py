"""Read-only repository introspection for the git segment.

Every question is answered by running git against an explicit path through
a ``GitBackend``. Nothing here raises: a path outside a working tree, a
missing git binary or a failed query all collapse to ``False``/``None``/
``RepoState.CLEAN``, with the cause logged at DEBUG.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import PurePath
from typing import Optional, Sequence

from tools.git_backends import GitBackend, GitResult, SubprocessGitBackend

logger = logging.getLogger(__name__)

CONFLICT_CODES = frozenset({"UU", "AA", "DD", "AU", "UD", "UA", "DU"})
STAGED_CHARS = "MRADC"
# A blank worktree column also counts; kept for compatibility with the
# original badge even though it misreads e.g. "T " as unstaged.
UNSTAGED_CHARS = "MRADC "


class RepoState(str, Enum):
    """Working-tree classification, highest precedence first."""

    CONFLICT = "conflict"
    UNTRACKED = "untracked"
    STAGED = "staged"
    UNSTAGED = "unstaged"
    CLEAN = "clean"


def classify_porcelain(text: str) -> RepoState:
    """
    Classify ``git status --porcelain`` output.

    The first rule that matches any line wins, in the order of ``RepoState``.

    Args:
        text: Raw status output; leading spaces are significant.

    Returns:
        RepoState for the working tree.
    """
    # Split on "\n" only; filenames may contain other Unicode line breaks
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if any(line[:2] in CONFLICT_CODES for line in lines):
        return RepoState.CONFLICT
    if any(line.startswith("??") for line in lines):
        return RepoState.UNTRACKED
    if any(line and line[0] in STAGED_CHARS for line in lines):
        return RepoState.STAGED
    if any(len(line) > 1 and line[1] in UNSTAGED_CHARS for line in lines):
        return RepoState.UNSTAGED
    return RepoState.CLEAN


class RepoInspector:
    """Answers repository questions about a single path."""

    def __init__(self, backend: Optional[GitBackend] = None):
        self.backend = backend or SubprocessGitBackend()

    def _run(self, path: str, args: Sequence[str]) -> GitResult:
        result = self.backend.run(path, args)
        if not result.ok:
            logger.debug("git %s in %s failed: %s", " ".join(args), path, result.reason)
        return result

    def is_working_tree(self, path: str) -> bool:
        """True if ``path`` lies inside a git working tree (not inside ``.git``)."""
        return self._run(path, ["rev-parse", "--is-inside-work-tree"]).value() == "true"

    def toplevel_name(self, path: str) -> Optional[str]:
        """Directory name of the working tree root, e.g. ``myproj``."""
        root = self._run(path, ["rev-parse", "--show-toplevel"]).value()
        if root is None:
            return None
        return PurePath(root).name or None

    def current_ref(self, path: str) -> Optional[str]:
        """
        Name of the checked-out branch.

        On a detached HEAD (git answers ``HEAD`` or nothing) this falls back
        to the nearest ref containing the commit, such as ``tags/v1.2~3``.
        The literal ``HEAD`` is never returned.
        """
        branch = self._run(path, ["rev-parse", "--abbrev-ref", "HEAD"]).value()
        if branch and branch != "HEAD":
            return branch

        logger.debug("detached HEAD in %s, describing", path)
        described = self._run(path, ["describe", "--contains", "--all", "HEAD"]).value()
        if described and described != "HEAD":
            return described
        return None

    def working_tree_state(self, path: str) -> RepoState:
        """Classify the working tree; any git failure reads as clean."""
        result = self._run(path, ["status", "--porcelain"])
        if not result.ok:
            return RepoState.CLEAN
        return classify_porcelain(result.stdout)

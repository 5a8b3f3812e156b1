"""Color tokens for tmux inline styles."""

from __future__ import annotations

from typing import Union

from tools.repo_inspector import RepoState

DEFAULT_COLOR = "white"

STATE_COLORS = {
    RepoState.CONFLICT: "#ff6b6b",
    RepoState.UNSTAGED: "#ff6b6b",
    RepoState.STAGED: "#f1fa8c",
    RepoState.UNTRACKED: "#bd93f9",
    RepoState.CLEAN: "#50fa7b",
}


def state_color(state: Union[RepoState, str]) -> str:
    """Foreground color for a repo state; unknown states are white."""
    try:
        return STATE_COLORS[RepoState(state)]
    except ValueError:
        return DEFAULT_COLOR


def tmux_fg(color: str) -> str:
    """tmux inline style switching the foreground to ``color``, verbatim."""
    return f"#[fg={color}]"

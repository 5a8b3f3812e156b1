"""Render segments as single lines of tmux-styled text."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from segments.colors import state_color, tmux_fg
from tools.repo_inspector import RepoInspector

logger = logging.getLogger(__name__)


def render_time(fmt: str, icon: str = "", now: Optional[datetime] = None) -> str:
    """
    Format the local time, prefixed with ``icon`` unless it is empty.

    Args:
        fmt: strftime pattern.
        icon: Glyph printed verbatim before the time.
        now: Moment to render; defaults to the current local time.

    Returns:
        The segment text.
    """
    moment = now or datetime.now()
    return f"{icon}{moment.strftime(fmt)}"


def render_git(inspector: RepoInspector, path: str, label_fg: str, icon: str) -> Optional[str]:
    """
    Build the git badge ``<state color><icon><label color><project>(<branch>)``.

    Args:
        inspector: RepoInspector used for every git query.
        path: Directory to describe.
        label_fg: Color restored after the icon, used for the label.
        icon: Glyph drawn in the state color.

    Returns:
        The segment text, or None when there is no badge to show.
    """
    if not inspector.is_working_tree(path):
        logger.debug("%s is not inside a working tree", path)
        return None

    project = inspector.toplevel_name(path)
    if project is None:
        return None
    branch = inspector.current_ref(path)
    if branch is None:
        return None

    state = inspector.working_tree_state(path)
    logger.debug("%s: %s on %s is %s", path, project, branch, state.value)
    return f"{tmux_fg(state_color(state))}{icon}{tmux_fg(label_fg)}{project}({branch})"

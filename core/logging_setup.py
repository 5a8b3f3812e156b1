"""Logging configuration.

Segments render inside the tmux status bar, so nothing may ever reach
stderr. By default the root logger gets a ``NullHandler`` (which also keeps
Python's last-resort handler quiet); a log file is opt-in.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(log_file: Optional[str] = None, level: str = "WARNING") -> logging.Handler:
    """
    Configure the root logger for a single invocation.

    Args:
        log_file: Optional path of a file to append log records to.
        level: Level name for the file handler.

    Returns:
        The handler that was installed.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_tmuxstar", False):
            root.removeHandler(existing)
            existing.close()

    handler: logging.Handler = logging.NullHandler()
    if log_file:
        path = Path(log_file).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError:
            # An unwritable log file must not take the segment down with it
            handler = logging.NullHandler()
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.setLevel(level.upper())
    handler._tmuxstar = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return handler

"""Effective settings: built-in defaults, then the config file, then TMUXSTAR_* env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from core.config_file import find_config_file, get_config_value, load_config, validate_config
from core.logging_setup import LOG_LEVELS
from core.exceptions import ConfigurationError

DEFAULT_LABEL_FG = "white"
DEFAULT_GIT_ICON = " "
DEFAULT_LEFT_ICON = " "
DEFAULT_TIME_FORMAT = "%Y-%m-%d %I:%M%p"
DEFAULT_TIME_ICON = "\U000f0e17 "
DEFAULT_RIGHT_FORMAT = "%Y-%m-%d %I:%M:%S%p"

# field name -> (environment variable, config file key)
_SOURCES = {
    "git_label_fg": ("TMUXSTAR_LABEL_FG", "git.label_fg"),
    "git_icon": ("TMUXSTAR_GIT_ICON", "git.icon"),
    "left_label_fg": ("TMUXSTAR_LEFT_LABEL_FG", "left.label_fg"),
    "left_icon": ("TMUXSTAR_LEFT_ICON", "left.icon"),
    "time_format": ("TMUXSTAR_TIME_FORMAT", "time.format"),
    "time_icon": ("TMUXSTAR_TIME_ICON", "time.icon"),
    "right_format": ("TMUXSTAR_RIGHT_FORMAT", "right.format"),
    "right_icon": ("TMUXSTAR_RIGHT_ICON", "right.icon"),
    "git_backend": ("TMUXSTAR_GIT_BACKEND", "general.git_backend"),
    "git_timeout": ("TMUXSTAR_GIT_TIMEOUT", "general.git_timeout"),
    "log_file": ("TMUXSTAR_LOG_FILE", "general.log_file"),
    "log_level": ("TMUXSTAR_LOG_LEVEL", "general.log_level"),
}


def _parse_timeout(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"git timeout must be a number of seconds, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"git timeout must be positive, got {value!r}")
    return timeout


@dataclass
class Config:
    # Git segment
    git_label_fg: str = DEFAULT_LABEL_FG
    git_icon: str = DEFAULT_GIT_ICON
    # "left" is the git segment under the alternate vocabulary
    left_label_fg: str = DEFAULT_LABEL_FG
    left_icon: str = DEFAULT_LEFT_ICON
    # Time segment, and its seconds-precision "right" twin
    time_format: str = DEFAULT_TIME_FORMAT
    time_icon: str = DEFAULT_TIME_ICON
    right_format: str = DEFAULT_RIGHT_FORMAT
    right_icon: str = DEFAULT_TIME_ICON
    # Git invocation
    git_backend: str = "subprocess"
    git_timeout: Optional[float] = None
    # Diagnostics; never written to stderr
    log_file: Optional[str] = None
    log_level: str = "WARNING"
    profile: Optional[str] = None
    source: Optional[Path] = None

    @classmethod
    def load(cls, profile: Optional[str] = None, config_path: Optional[Path] = None) -> "Config":
        """
        Build the effective configuration.

        Environment variables override the config file, which overrides the
        built-in defaults. Command-line flags are applied later by the CLI.

        Raises:
            ConfigurationError: If the file is unreadable or invalid.
        """
        profile = profile or os.getenv("TMUXSTAR_PROFILE") or None
        file_data = load_config(config_path, profile=profile)
        is_valid, errors = validate_config(file_data)
        if not is_valid:
            raise ConfigurationError("; ".join(errors))

        values: Dict[str, Any] = {}
        for name, (env_var, file_key) in _SOURCES.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                values[name] = env_value
                continue
            file_value = get_config_value(file_data, file_key)
            if file_value is not None:
                values[name] = file_value

        if "git_timeout" in values:
            values["git_timeout"] = _parse_timeout(values["git_timeout"])
        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()
            if values["log_level"] not in LOG_LEVELS:
                raise ConfigurationError(f"Unknown log level: {values['log_level']}")

        return cls(
            profile=profile,
            source=find_config_file(config_path),
            **values,
        )

    def as_rows(self) -> list[tuple[str, str]]:
        """(name, value) pairs for display, private fields excluded."""
        rows = []
        for f in fields(self):
            if f.name.startswith("_"):
                continue
            value = getattr(self, f.name)
            if value is None:
                shown = ""
            elif isinstance(value, str):
                shown = repr(value)
            else:
                shown = str(value)
            rows.append((f.name, shown))
        return rows

"""Configuration file support for tmuxstar."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Any, Optional

import tomli

from core.exceptions import ConfigurationError
from core.logging_setup import LOG_LEVELS

CONFIG_DIRNAME = "tmuxstar"
CONFIG_FILENAME = "config.toml"
KNOWN_BACKENDS = ["subprocess", "gitpython"]


_STRING_KEYS = {
    "git": ["label_fg", "icon"],
    "left": ["label_fg", "icon"],
    "time": ["format", "icon"],
    "right": ["format", "icon"],
    "general": ["log_file"],
}


def default_config_path() -> Path:
    """
    Resolve where the configuration file lives.

    ``TMUXSTAR_CONFIG`` wins, then ``$XDG_CONFIG_HOME/tmuxstar/config.toml``,
    then ``~/.config/tmuxstar/config.toml``.
    """
    explicit = os.getenv("TMUXSTAR_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / CONFIG_DIRNAME / CONFIG_FILENAME


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file.

    Args:
        config_path: Explicit location; defaults to ``default_config_path()``.

    Returns:
        Path to config file if found, None otherwise.
    """
    path = config_path or default_config_path()
    if path.exists() and path.is_file():
        return path
    return None


def load_config(config_path: Optional[Path] = None, profile: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file.

    Args:
        config_path: Explicit location of the file.
        profile: Optional profile name; its sections override the base ones.

    Returns:
        Configuration dictionary (empty when there is no file).

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML,
            or if the requested profile does not exist.
    """
    path = find_config_file(config_path)
    if not path:
        if profile:
            raise ConfigurationError(f"Profile '{profile}' requested but no config file found")
        return {}

    try:
        with open(path, "rb") as f:
            config_data = tomli.load(f)
    except tomli.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    profiles = config_data.pop("profiles", {})
    if not profile:
        return config_data
    if not isinstance(profiles, dict) or not isinstance(profiles.get(profile), dict):
        raise ConfigurationError(f"Unknown profile '{profile}' in {path}")

    # Profile sections override base sections key by key
    merged: Dict[str, Any] = {k: dict(v) if isinstance(v, dict) else v for k, v in config_data.items()}
    for section, values in profiles[profile].items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def get_config_value(config: Dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Get a configuration value, supporting nested keys.

    Args:
        config: Configuration dictionary.
        key: Key path (e.g., "git.label_fg").
        default: Default value if not found.

    Returns:
        Configuration value or default.
    """
    keys = key.split(".")
    value = config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate a loaded configuration.

    Args:
        config: Configuration dictionary.

    Returns:
        Tuple of (is_valid, errors).
    """
    errors = []

    for section, keys in _STRING_KEYS.items():
        if section not in config:
            continue
        if not isinstance(config[section], dict):
            errors.append(f"[{section}] must be a table")
            continue
        for key in keys:
            if key in config[section] and not isinstance(config[section][key], str):
                errors.append(f"{section}.{key} must be a string")

    general = config.get("general", {})
    if isinstance(general, dict):
        backend = general.get("git_backend")
        if backend is not None and backend not in KNOWN_BACKENDS:
            errors.append(f"general.git_backend must be one of: {', '.join(KNOWN_BACKENDS)}")

        if "git_timeout" in general:
            timeout = general["git_timeout"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                errors.append("general.git_timeout must be a positive number of seconds")

        level = general.get("log_level")
        if level is not None and (not isinstance(level, str) or level.upper() not in LOG_LEVELS):
            errors.append(f"general.log_level must be one of: {', '.join(LOG_LEVELS)}")

    return len(errors) == 0, errors


DEFAULT_CONFIG = """# tmuxstar configuration

[general]
# Which git runner to use: "subprocess" or "gitpython"
git_backend = "subprocess"

# Seconds before a git call is abandoned (unset: wait forever)
# git_timeout = 2

# Append diagnostics here; nothing is ever written to stderr
# log_file = "~/.cache/tmuxstar/tmuxstar.log"
# log_level = "DEBUG"

[git]
label_fg = "white"
icon = " "

[left]
# icon = "\\ue0a0 "

[time]
format = "%Y-%m-%d %I:%M%p"
# icon = "\\U000f0e17 "

[right]
format = "%Y-%m-%d %I:%M:%S%p"

[profiles.light]
# Profile overrides, selected with --profile light or TMUXSTAR_PROFILE
# [profiles.light.git]
# label_fg = "black"
"""


def create_default_config(config_path: Optional[Path] = None, force: bool = False) -> Path:
    """
    Create a default configuration file.

    Args:
        config_path: Where to write; defaults to ``default_config_path()``.
        force: Overwrite an existing file.

    Returns:
        Path to created config file.

    Raises:
        ConfigurationError: If the file exists and ``force`` is not set.
    """
    path = config_path or default_config_path()
    if path.exists() and not force:
        raise ConfigurationError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    return path

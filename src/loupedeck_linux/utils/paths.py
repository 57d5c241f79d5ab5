"""XDG base directory helpers."""

import os
from pathlib import Path

APP_DIR_NAME = "loupedeck-linux"


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    # Relative XDG paths are invalid and are ignored
    if value and Path(value).is_absolute():
        return Path(value)
    return fallback


def config_dir() -> Path:
    """``$XDG_CONFIG_HOME/loupedeck-linux`` (default ``~/.config/loupedeck-linux``)."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / APP_DIR_NAME


def state_dir() -> Path:
    """``$XDG_STATE_HOME/loupedeck-linux`` (default ``~/.local/state/loupedeck-linux``)."""
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / APP_DIR_NAME


def pages_config_path() -> Path:
    """Location of the page layout document edited by the dashboard."""
    return config_dir() / "config.json"


def settings_path() -> Path:
    """Location of the application settings."""
    return config_dir() / "settings.json"


def default_log_path() -> Path:
    """Location of the rotating log file."""
    return state_dir() / "loupedeck-linux.log"

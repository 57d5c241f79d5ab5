"""Utility helpers."""

from .paths import config_dir, default_log_path, pages_config_path, settings_path, state_dir

__all__ = ["config_dir", "default_log_path", "pages_config_path", "settings_path", "state_dir"]

"""CLI commands for loupedeck-linux."""

from .config import config
from .device import device

__all__ = ["config", "device"]

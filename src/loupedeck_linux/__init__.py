"""Loupedeck Live S control surface for Linux."""

__version__ = "0.1.0"

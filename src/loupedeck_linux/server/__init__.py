"""HTTP config API."""

from loupedeck_linux.server.api import ApiServer, create_api

__all__ = ["ApiServer", "create_api"]

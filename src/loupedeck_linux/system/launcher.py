"""Launching desktop applications detached from this process."""

import asyncio
import logging
import os

logger = logging.getLogger(__name__)


class AppLauncher:
    """Starts shell commands in their own session with output discarded."""

    async def launch(self, command: str) -> bool:
        """
        Start ``command`` in the background.

        Returns:
            True when the command was handed to the shell, False when it
            was empty or could not be started
        """
        command = command.strip()
        if not command:
            logger.debug("Empty command, nothing to launch")
            return False

        if not os.environ.get("DISPLAY") and not os.environ.get("WAYLAND_DISPLAY"):
            logger.warning(f"Neither DISPLAY nor WAYLAND_DISPLAY is set; {command!r} may not open a window")

        try:
            process = await asyncio.create_subprocess_shell(
                f"setsid {command} >/dev/null 2>&1 &",
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await process.wait()
        except OSError as e:
            logger.error(f"Failed to launch {command!r}: {e}")
            return False

        if returncode != 0:
            logger.error(f"Shell refused to launch {command!r} (exit status {returncode})")
            return False

        logger.info(f"Launched: {command}")
        return True

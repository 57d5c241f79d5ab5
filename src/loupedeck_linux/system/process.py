"""Running OS helper commands without blocking the event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from loupedeck_linux.exceptions import SystemControlError

logger = logging.getLogger(__name__)

# Signature shared by run_command and the fakes used in tests
CommandRunner = Callable[[Sequence[str]], Awaitable[str]]

DEFAULT_COMMAND_TIMEOUT = 3.0


async def run_command(argv: Sequence[str], timeout: float = DEFAULT_COMMAND_TIMEOUT) -> str:
    """
    Run a command and return its stdout.

    Raises:
        SystemControlError: If the program is missing, exits non-zero or
            does not finish within ``timeout`` seconds
    """
    command = list(argv)
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise SystemControlError(command, "program not found") from e
    except OSError as e:
        raise SystemControlError(command, str(e)) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError as e:
        process.kill()
        await process.wait()
        raise SystemControlError(command, f"timed out after {timeout}s") from e

    if process.returncode != 0:
        detail = stderr.decode(errors="replace").strip() or f"exit status {process.returncode}"
        raise SystemControlError(command, detail)

    output = stdout.decode(errors="replace").strip()
    logger.debug(f"{' '.join(command)} -> {output!r}")
    return output

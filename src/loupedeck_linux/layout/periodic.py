"""Cancellable periodic asyncio task."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Runs ``callback`` every ``interval`` seconds until cancelled.

    The first run happens one interval after ``start()``. A failing run is
    logged and the schedule continues.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float, name: str = "periodic"):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self.interval = interval
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "PeriodicTask":
        if self.running:
            return self
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.debug(f"Started {self.name} every {self.interval}s")
        return self

    def cancel(self) -> None:
        """Request cancellation; returns immediately."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug(f"Cancelled {self.name}")

    async def stop(self, timeout: float = 5.0) -> None:
        """Cancel and wait (bounded) for the task to finish."""
        task = self._task
        if task is None:
            return
        self.cancel()
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done:
            logger.warning(f"{self.name} did not stop within {timeout}s")
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"{self.name} failed: {e}", exc_info=True)

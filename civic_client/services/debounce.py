import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run an async callback once input has been quiet for `delay` seconds.

    Each trigger() cancels the pending timer, so a burst of keystrokes
    produces exactly one call, with the arguments of the last trigger.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        self.delay = delay
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(*args))

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None

    async def _run(self, *args: Any) -> None:
        await asyncio.sleep(self.delay)
        await self.callback(*args)

    async def wait(self) -> None:
        """Wait for the pending call (if any) to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Debounced call was superseded")

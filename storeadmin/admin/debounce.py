"""Cancel-and-reschedule timer for coalescing rapid calls."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class Debouncer:
    """Run only the most recent of a burst of calls, after a quiet period.

    Each :meth:`schedule` cancels the pending call (if its delay has not yet
    elapsed) and starts a new delayed one, so superseded calls never run.
    A call whose delay has elapsed is already in flight and is left to finish.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._task: asyncio.Task[Any] | None = None
        self._fired = False

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(
        self, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any
    ) -> "asyncio.Task[Any]":
        self.cancel()
        self._fired = False
        self._task = asyncio.create_task(self._run(fn, *args, **kwargs))
        return self._task

    def cancel(self) -> None:
        """Drop the pending call unless it is already running."""
        if self.pending and not self._fired:
            self._task.cancel()  # type: ignore[union-attr]
        self._task = None

    async def wait(self) -> Any:
        """Wait for the latest call and return its result; None if it was cancelled."""
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            return None

    async def _run(self, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        await asyncio.sleep(self.delay)
        self._fired = True
        return await fn(*args, **kwargs)

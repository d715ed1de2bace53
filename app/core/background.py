"""
Detached background work for fire-and-forget outbound calls
"""

from typing import Any, Callable, Coroutine, Optional, Set
import asyncio
import logging

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[str, BaseException], None]


def log_task_error(name: str, error: BaseException) -> None:
    logger.error(
        f"Background task {name} failed: {type(error).__name__}: {error}",
        exc_info=(type(error), error, error.__traceback__)
    )


class BackgroundRunner:
    """
    Runs coroutines as tracked, detached asyncio tasks.

    Callers never await the work. At most ``max_pending`` tasks are in
    flight; beyond that new work is dropped with a warning. Failures are
    routed to ``on_error`` and never reach the caller.
    """

    def __init__(self, max_pending: int = 100, on_error: Optional[ErrorHandler] = None):
        self.max_pending = max_pending
        self.on_error = on_error or log_task_error
        self._tasks: Set[asyncio.Task] = set()
        self.dropped = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Coroutine[Any, Any, Any], name: str) -> Optional[asyncio.Task]:
        """
        Schedule ``coro`` without awaiting it. Returns the task, or None when dropped.
        """
        if len(self._tasks) >= self.max_pending:
            self.dropped += 1
            logger.warning(f"Background queue full ({self.max_pending}), dropping {name}")
            coro.close()
            return None

        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Background task {task.get_name()} cancelled")
            return
        error = task.exception()
        if error is not None:
            self.on_error(task.get_name(), error)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """
        Wait for in-flight tasks; cancel whatever is still running after ``timeout``
        """
        if not self._tasks:
            return
        pending = list(self._tasks)
        done, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(f"Cancelled {len(still_running)} background tasks on drain")
            await asyncio.gather(*still_running, return_exceptions=True)

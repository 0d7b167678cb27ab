"""
Helpers for bounded external calls and detached cleanup work.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Set, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Strong references to detached tasks; the event loop only keeps weak ones
_background_tasks: Set[asyncio.Task] = set()


class AsyncCallTimeoutError(asyncio.TimeoutError):
    """An external call timed out."""

    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout


async def with_timeout(awaitable: Awaitable[T], timeout: float, message: str) -> T:
    """
    Await `awaitable`, giving up after `timeout` seconds.

    No retry is attempted. The pending call is cancelled on timeout.

    Raises:
        AsyncCallTimeoutError: With `message`, when the timeout expires
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        if isinstance(e, AsyncCallTimeoutError):
            raise
        raise AsyncCallTimeoutError(message, timeout) from e


def fire_and_forget(
    coro: Awaitable, log: Optional[logging.Logger] = None, failure_message: str = ""
) -> asyncio.Task:
    """
    Schedule `coro` without awaiting it.

    A failure of the task is logged at ERROR with `failure_message` and
    never re-raised into the caller.
    """
    log = log or logger
    task = asyncio.ensure_future(coro)
    _background_tasks.add(task)

    def _done(t: asyncio.Task) -> None:
        _background_tasks.discard(t)
        if t.cancelled():
            return
        exc = t.exception()
        if exc is not None:
            log.error(f"{failure_message}{exc}")

    task.add_done_callback(_done)
    return task


async def drain_background_tasks() -> None:
    """Wait for the detached tasks of the running loop. Used on shutdown and in tests."""
    loop = asyncio.get_running_loop()
    while True:
        pending = [t for t in _background_tasks if t.get_loop() is loop and not t.done()]
        if not pending:
            return
        await asyncio.gather(*pending, return_exceptions=True)

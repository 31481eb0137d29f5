"""Cancellation context for producer calls.

A QueryContext is created by the caller for one query and handed to the
producer. It is the only way the producer suspends: resolver lookups are
awaited through run(), which aborts as soon as the context is cancelled or
its deadline passes.
"""

import asyncio
import contextlib
import time
from collections.abc import Awaitable
from typing import TypeVar

from sitewise_framer.core.errors import QueryCancelledError

T = TypeVar("T")


class QueryContext:
    """Caller-owned cancellation token with an optional deadline.

    Example:
        ```python
        ctx = QueryContext(timeout=5.0)
        frames = await produce_frames(ctx, response, resources)
        ```
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Create a context.

        Args:
            timeout: Seconds from now after which the context expires.
                None means no deadline.
        """
        self._cancelled = asyncio.Event()
        self._reason: str | None = None
        self._deadline = None if timeout is None else time.monotonic() + timeout

    @property
    def cancelled(self) -> bool:
        """Return True if the context was cancelled or has expired."""
        return self._cancelled.is_set() or self._expired()

    @property
    def reason(self) -> str | None:
        if self._cancelled.is_set():
            return self._reason
        if self._expired():
            return "deadline exceeded"
        return None

    def cancel(self, reason: str = "context cancelled") -> None:
        """Cancel the context. Pending and future run() calls abort."""
        if not self._cancelled.is_set():
            self._reason = reason
            self._cancelled.set()

    def _expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def _remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def check(self) -> None:
        """Raise QueryCancelledError if the context is no longer live."""
        if self.cancelled:
            raise QueryCancelledError(self.reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await awaitable unless the context is cancelled first.

        Args:
            awaitable: The lookup to wait for.

        Returns:
            The awaitable's result.

        Raises:
            QueryCancelledError: If the context is cancelled before or while
                waiting. The pending lookup is cancelled.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise QueryCancelledError(self.reason)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self._remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise QueryCancelledError(self.reason)

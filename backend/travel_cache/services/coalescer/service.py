"""Single-flight request coalescer.

Concurrent identical requests (same key) share one upstream call instead of
each making their own. The first caller starts the operation; everyone who
arrives while it is in flight awaits the same future and sees the same result
or the same exception.

The registration for a key is dropped as soon as the operation settles, so
the next call after that always starts a fresh operation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallCoalescer:
    """Keyed registry of in-flight asyncio operations.

    Keys are compared as-is: no normalization, and ``None``, ``""`` and
    ``"none"`` are three different keys.
    """

    def __init__(self) -> None:
        self._in_flight: dict[Hashable, asyncio.Future] = {}

    async def run(self, key: Hashable, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` once per key, sharing the result.

        If ``key`` is already in flight, waits for the existing operation and
        does not call ``operation``. Otherwise calls it immediately and
        registers the result for other callers.

        A caller being cancelled does not cancel the shared operation. No
        timeout is applied here; callers wrap ``operation`` for that.

        Args:
            key: Identifier of the logical operation.
            operation: Zero-argument callable returning an awaitable.

        Returns:
            The operation's result.

        Raises:
            Exception: Whatever the operation raises, unchanged.
        """
        future = self._in_flight.get(key)
        if future is None or future.done():
            future = asyncio.ensure_future(operation())
            self._in_flight[key] = future
            # Registered before any waiter, so it runs before they resume
            future.add_done_callback(lambda done: self._release(key, done))
        else:
            logger.debug(f"[COALESCE] joined in-flight call: {key!r}")

        return await asyncio.shield(future)

    def _release(self, key: Hashable, future: asyncio.Future) -> None:
        # After clear() a newer call may own the key
        if self._in_flight.get(key) is future:
            del self._in_flight[key]

    def clear(self) -> None:
        """Forget all in-flight registrations without cancelling them.

        Callers already waiting still get their result; new calls start
        fresh operations even if the old ones are still running.
        """
        self._in_flight.clear()

    def is_pending(self, key: Hashable) -> bool:
        return key in self._in_flight

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)


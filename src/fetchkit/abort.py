"""Per-call cancellation tokens.

An :class:`AbortController` is created for every fetcher invocation. Its
:class:`AbortSignal` is handed to the transport, which runs the network round
trip through :meth:`AbortSignal.run`. Calling
:meth:`AbortController.abort` cancels the task doing that round trip, and
:meth:`~AbortSignal.run` reports the outcome as
:class:`~fetchkit.exceptions.RequestCancelled`.

Cancellation of the *caller's* own task is left alone: it still surfaces as
:class:`asyncio.CancelledError`.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from fetchkit.exceptions import RequestCancelled

T = TypeVar("T")


class AbortSignal:
    """Read side of an :class:`AbortController`."""

    def __init__(self) -> None:
        self._aborted = False
        self._tasks: set[asyncio.Future] = set()

    @property
    def aborted(self) -> bool:
        """Whether the owning controller has fired."""
        return self._aborted

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* in its own task so that an abort can cancel it.

        Raises:
            RequestCancelled: If the signal fired before or during the await.
        """
        if self._aborted:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelled()

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        try:
            return await task
        except asyncio.CancelledError:
            if self._aborted and task.cancelled():
                raise RequestCancelled() from None
            raise
        finally:
            self._tasks.discard(task)

    def _fire(self) -> None:
        if self._aborted:
            return
        self._aborted = True
        for task in list(self._tasks):
            task.cancel()


class AbortController:
    """Owns one :class:`AbortSignal`; :meth:`abort` fires it exactly once."""

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self) -> None:
        """Cancel whatever is running under :attr:`signal`. Idempotent."""
        self.signal._fire()

"""Tests for per-call abort controllers."""

from __future__ import annotations

import asyncio

import pytest

from fetchkit.abort import AbortController
from fetchkit.exceptions import RequestCancelled


async def _never_finishes() -> None:
    await asyncio.Event().wait()


class TestAbortSignal:
    @pytest.mark.asyncio
    async def test_run_returns_result(self) -> None:
        controller = AbortController()

        async def work() -> int:
            return 5

        assert await controller.signal.run(work()) == 5
        assert controller.signal.aborted is False

    @pytest.mark.asyncio
    async def test_abort_cancels_running_task(self) -> None:
        controller = AbortController()
        task = asyncio.ensure_future(controller.signal.run(_never_finishes()))
        await asyncio.sleep(0)

        controller.abort()

        with pytest.raises(RequestCancelled) as exc_info:
            await task
        assert exc_info.value.code == "ERR_CANCELED"
        assert controller.signal.aborted is True

    @pytest.mark.asyncio
    async def test_run_after_abort_raises_immediately(self) -> None:
        controller = AbortController()
        controller.abort()
        with pytest.raises(RequestCancelled):
            await controller.signal.run(_never_finishes())

    @pytest.mark.asyncio
    async def test_abort_is_idempotent(self) -> None:
        controller = AbortController()
        controller.abort()
        controller.abort()
        assert controller.signal.aborted is True

    @pytest.mark.asyncio
    async def test_outer_cancellation_propagates(self) -> None:
        controller = AbortController()
        task = asyncio.ensure_future(controller.signal.run(_never_finishes()))
        await asyncio.sleep(0)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.signal.aborted is False

    @pytest.mark.asyncio
    async def test_errors_pass_through(self) -> None:
        controller = AbortController()

        async def boom() -> None:
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await controller.signal.run(boom())

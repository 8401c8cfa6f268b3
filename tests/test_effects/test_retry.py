"""Tests for the retry effect."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from fetchkit.effects.retry import retry
from fetchkit.exceptions import RequestError, TemplateError
from fetchkit.models import EffectContext

CONTEXT = EffectContext(base_url="https://api.example.com", endpoint="/users", method="get")


class _Flaky:
    """Async callable that raises queued errors before returning ``reply``."""

    def __init__(self, errors: list[BaseException], reply: Any = "ok") -> None:
        self.errors = list(errors)
        self.reply = reply
        self.calls = 0

    async def __call__(self, **kwargs: Any) -> Any:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.reply


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record ``asyncio.sleep`` delays instead of waiting."""
    delays: list[float] = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays


class TestRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self, sleeps) -> None:
        inner = _Flaky([])
        call = retry(max_retries=3)(inner, CONTEXT)
        assert await call() == "ok"
        assert inner.calls == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_retries_server_errors_with_backoff(self, sleeps) -> None:
        inner = _Flaky([RequestError("down", 503), RequestError("down", 502)])
        call = retry(max_retries=3, backoff=0.5)(inner, CONTEXT)

        assert await call() == "ok"
        assert inner.calls == 3
        assert sleeps == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_retries_network_errors(self, sleeps) -> None:
        inner = _Flaky([RequestError("connection refused")])
        call = retry(max_retries=1)(inner, CONTEXT)
        assert await call() == "ok"
        assert inner.calls == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, sleeps) -> None:
        inner = _Flaky([RequestError("down", 500)] * 3)
        call = retry(max_retries=2, backoff=1)(inner, CONTEXT)

        with pytest.raises(RequestError, match="down"):
            await call()
        assert inner.calls == 3
        assert sleeps == [1, 2]

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self, sleeps) -> None:
        inner = _Flaky([RequestError("bad input", 400)])
        call = retry(max_retries=3)(inner, CONTEXT)

        with pytest.raises(RequestError):
            await call()
        assert inner.calls == 1

    @pytest.mark.asyncio
    async def test_custom_statuses(self, sleeps) -> None:
        inner = _Flaky([RequestError("slow down", 429)])
        call = retry(max_retries=1, retry_statuses={429})(inner, CONTEXT)
        assert await call() == "ok"

    @pytest.mark.asyncio
    async def test_template_error_not_retried(self, sleeps) -> None:
        inner = _Flaky([TemplateError("Missing path parameter 'id'")])
        call = retry(max_retries=3)(inner, CONTEXT)

        with pytest.raises(TemplateError):
            await call()
        assert inner.calls == 1

    @pytest.mark.asyncio
    async def test_cancelled_reply_not_retried(self, sleeps) -> None:
        inner = _Flaky([], reply=None)
        call = retry(max_retries=3)(inner, CONTEXT)
        assert await call() is None
        assert inner.calls == 1

    @pytest.mark.asyncio
    async def test_logs_each_retry(self, sleeps, caplog) -> None:
        caplog.set_level("WARNING", logger="fetchkit.effects.retry")
        inner = _Flaky([RequestError("down", 500)])
        await retry(max_retries=1)(inner, CONTEXT)()
        assert "GET /users failed (down), retrying" in caplog.text

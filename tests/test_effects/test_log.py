"""Tests for the call-logging effect."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from fetchkit.effects.log import log_calls
from fetchkit.exceptions import RequestError
from fetchkit.models import EffectContext

CONTEXT = EffectContext(base_url="https://api.example.com", endpoint="/users/:id", method="get")


async def _ok(**kwargs: Any) -> Any:
    return {"id": "1"}


async def _aborted(**kwargs: Any) -> Any:
    return None


async def _fails(**kwargs: Any) -> Any:
    raise RequestError("not found", 404)


class TestLogCalls:
    @pytest.mark.asyncio
    async def test_logs_start_and_finish(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="fetchkit.calls")

        assert await log_calls()(_ok, CONTEXT)() == {"id": "1"}

        messages = [record.getMessage() for record in caplog.records]
        assert messages[0] == "GET /users/:id started"
        assert messages[1].startswith("GET /users/:id finished in ")

    @pytest.mark.asyncio
    async def test_logs_empty_reply(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="fetchkit.calls")
        assert await log_calls()(_aborted, CONTEXT)() is None
        assert "finished with no reply" in caplog.text

    @pytest.mark.asyncio
    async def test_failure_logged_and_reraised(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="fetchkit.calls")

        with pytest.raises(RequestError):
            await log_calls()(_fails, CONTEXT)()

        failure = caplog.records[-1]
        assert failure.levelno == logging.WARNING
        assert "failed after" in failure.getMessage()
        assert "not found" in failure.getMessage()

    @pytest.mark.asyncio
    async def test_custom_logger_and_level(self, caplog) -> None:
        custom = logging.getLogger("tests.calls")
        caplog.set_level(logging.INFO, logger="tests.calls")

        await log_calls(custom, level=logging.INFO)(_ok, CONTEXT)()

        assert [record.name for record in caplog.records] == ["tests.calls", "tests.calls"]
        assert all(record.levelno == logging.INFO for record in caplog.records)

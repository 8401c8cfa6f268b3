"""Tests for named effect registration and entry-point discovery."""

from __future__ import annotations

from typing import Any

import pytest

from fetchkit.effects.registry import ENTRY_POINT_GROUP, EffectRegistry
from fetchkit.exceptions import EffectError
from fetchkit.models import EffectContext

CONTEXT = EffectContext(base_url="https://api.example.com", endpoint="/users", method="get")


def _suffix(text: str):
    def factory():
        def effect(fetcher: Any, context: EffectContext) -> Any:
            async def call(**kwargs: Any) -> Any:
                return f"{await fetcher(**kwargs)}{text}"

            return call

        return effect

    return factory


async def _base(**kwargs: Any) -> str:
    return "reply"


class _FakeEntryPoint:
    def __init__(self, name: str, target: Any = None, error: Exception | None = None) -> None:
        self.name = name
        self._target = target
        self._error = error

    def load(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._target


class TestRegistry:
    def test_log_is_built_in(self) -> None:
        assert EffectRegistry().names() == ["log"]

    def test_register_and_get(self) -> None:
        registry = EffectRegistry()
        registry.register("bang", _suffix("!"))
        assert registry.names() == ["bang", "log"]
        assert callable(registry.get("bang"))

    def test_duplicate_rejected(self) -> None:
        registry = EffectRegistry()
        with pytest.raises(EffectError, match="already registered"):
            registry.register("log", _suffix("!"))

    def test_unknown_name(self) -> None:
        with pytest.raises(EffectError, match="Unknown effect 'nope'") as exc_info:
            EffectRegistry().get("nope")
        assert "log" in str(exc_info.value)
        assert exc_info.value.exit_code == 10

    def test_failing_factory(self) -> None:
        registry = EffectRegistry()

        def broken():
            raise RuntimeError("no config")

        registry.register("broken", broken)
        with pytest.raises(EffectError, match="failed to initialise: no config"):
            registry.get("broken")

    @pytest.mark.asyncio
    async def test_load_composes_in_order(self) -> None:
        registry = EffectRegistry()
        registry.register("a", _suffix("-a"))
        registry.register("b", _suffix("-b"))

        call = registry.load(["a", "b"])(_base, CONTEXT)

        assert await call() == "reply-a-b"


class TestDiscover:
    def test_registers_entry_points(self, monkeypatch: pytest.MonkeyPatch) -> None:
        groups: list[str] = []

        def fake_entry_points(group: str):
            groups.append(group)
            return [
                _FakeEntryPoint("trace", _suffix("?")),
                _FakeEntryPoint("log", _suffix("x")),
                _FakeEntryPoint("broken", error=ImportError("missing module")),
            ]

        monkeypatch.setattr("importlib.metadata.entry_points", fake_entry_points)
        registry = EffectRegistry()

        assert registry.discover() == ["trace"]
        assert groups == [ENTRY_POINT_GROUP]
        assert registry.names() == ["log", "trace"]

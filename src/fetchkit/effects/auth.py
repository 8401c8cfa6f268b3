"""Effects that inject credentials or fixed headers into every call.

Caller-supplied ``headers`` and ``query`` values win over injected ones, so
a single call can still override what the effect adds.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Union

from fetchkit.models import EffectContext
from fetchkit.types import Effect, FetcherCallable

HeaderSource = Union[Mapping[str, str], Callable[[EffectContext], Mapping[str, str]]]


def with_headers(headers: HeaderSource) -> Effect:
    """Merge *headers* into every call.

    Args:
        headers: A fixed mapping, or a function of the
            :class:`~fetchkit.models.EffectContext` evaluated on every call
            (useful for tokens that rotate).
    """

    def effect(fetcher: FetcherCallable[Any], context: EffectContext) -> FetcherCallable[Any]:
        async def call(**kwargs: Any) -> Any:
            injected = headers(context) if callable(headers) else headers
            kwargs["headers"] = {**injected, **(kwargs.get("headers") or {})}
            return await fetcher(**kwargs)

        return call

    return effect


def with_query(params: Mapping[str, Any]) -> Effect:
    """Merge fixed query parameters into every call."""

    def effect(fetcher: FetcherCallable[Any], context: EffectContext) -> FetcherCallable[Any]:
        async def call(**kwargs: Any) -> Any:
            kwargs["query"] = {**params, **(kwargs.get("query") or {})}
            return await fetcher(**kwargs)

        return call

    return effect


def bearer_auth(token: str) -> Effect:
    """Send ``Authorization: Bearer <token>`` with every call."""
    return with_headers({"Authorization": f"Bearer {token}"})


def api_key_auth(name: str, value: str, location: str = "header") -> Effect:
    """Send an API key as a header or a query parameter.

    Args:
        name: Header or query parameter name, e.g. ``X-API-Key``.
        value: The key itself.
        location: ``"header"`` or ``"query"``.
    """
    if location == "query":
        return with_query({name: value})
    if location == "header":
        return with_headers({name: value})
    raise ValueError(f"Unsupported API key location: {location}")

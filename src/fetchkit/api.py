"""API builder -- turn an endpoint schema into a map of callables.

:func:`make_api` validates the schema, builds one
:class:`~fetchkit.fetcher.Fetcher` per ``(endpoint, method)`` pair, wraps it
with the configured effect (re-attaching the original ``abort``) and returns
the read-only Endpoints Map::

    api = make_api(
        {"/users/:id": ["get", "delete"], "/users": ["get", "post"]},
        base_url="https://api.example.com",
        effect=retry(max_retries=2),
    )
    user = await api["/users/:id"]["get"](params={"id": "42"})
    api["/users/:id"]["get"].abort()

Building performs no network I/O. A malformed schema raises
:class:`~fetchkit.exceptions.SchemaError` before any fetcher exists.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Optional

from fetchkit.effects.base import apply_effect
from fetchkit.fetcher import fetcher
from fetchkit.models import ApiSchema, EffectContext
from fetchkit.transport.base import Transport
from fetchkit.transport.httpx_transport import HttpxTransport
from fetchkit.types import AbortableFetcher, Effect, Endpoints

logger = logging.getLogger(__name__)


def make_api(
    schema: Any,
    *,
    base_url: str,
    effect: Optional[Effect] = None,
    transport: Optional[Transport] = None,
) -> Endpoints:
    """Build the Endpoints Map for *schema*.

    Args:
        schema: Mapping of endpoint path templates to their methods (a list
            of method names, or a mapping keyed by method name), or an
            already-validated :class:`~fetchkit.models.ApiSchema`. It is
            never mutated.
        base_url: Absolute URL every endpoint is resolved against.
        effect: Optional transformation applied once to every fetcher.
        transport: Transport shared by all fetchers. Defaults to a lazily
            opened :class:`~fetchkit.transport.HttpxTransport`.

    Returns:
        A read-only mapping ``endpoint -> method -> fetcher``; every fetcher
        exposes ``abort()``.

    Raises:
        SchemaError: If the schema is malformed.
    """
    api_schema = ApiSchema.parse(schema)
    transport = transport if transport is not None else HttpxTransport()

    result: dict[str, dict[str, AbortableFetcher[Any]]] = {}
    for endpoint, method in api_schema.pairs():
        handler = fetcher(base_url, endpoint, method, transport)
        context = EffectContext(base_url=base_url, endpoint=endpoint, method=method)
        result.setdefault(endpoint, {})[method] = apply_effect(effect, handler, context)

    logger.debug(
        "Built API for %s: %d endpoints, %d fetchers",
        base_url,
        len(result),
        sum(len(methods) for methods in result.values()),
    )
    return MappingProxyType(
        {endpoint: MappingProxyType(installed) for endpoint, installed in result.items()}
    )

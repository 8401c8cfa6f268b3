"""Disk-backed reply caching for GET calls.

Uses :mod:`diskcache` to persist GET replies on the filesystem with a
configurable time-to-live. Only GET calls are cached; failures raise before
anything is stored, and aborted calls (``None`` replies) are never stored.

Cache keys are SHA-256 hashes of ``METHOD|base_url|endpoint|params|query``
with params and query JSON-encoded with sorted keys, so identical calls
always resolve to the same entry regardless of argument ordering.

See Also:
    :class:`~fetchkit.models.CacheConfig` -- controls ``enabled`` and
    ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Optional

import diskcache

from fetchkit.models import CacheConfig, EffectContext
from fetchkit.types import Effect, FetcherCallable

logger = logging.getLogger(__name__)


class ResponseCache:
    """Disk-backed cache for GET replies.

    Args:
        cache_dir: Root directory for the cache. A ``replies/`` subdirectory
            is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = ResponseCache("/tmp/api-cache", CacheConfig(enabled=True, ttl_seconds=60))
        api = make_api(schema, base_url=url, effect=cached(cache))
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "replies"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, key: str) -> tuple[bool, Any]:
        """Look up *key*.

        Returns:
            ``(True, reply)`` on a hit, ``(False, None)`` on a miss or when
            caching is disabled.
        """
        if self._cache is None:
            return False, None
        sentinel = object()
        value = self._cache.get(key, default=sentinel)
        if value is sentinel:
            return False, None
        return True, value

    def set(self, key: str, reply: Any) -> None:
        """Store *reply* under *key* for ``ttl_seconds``."""
        if self._cache is None:
            return
        self._cache.set(key, reply, expire=self._config.ttl_seconds)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics."""
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "replies"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()

    @staticmethod
    def make_key(context: EffectContext, params: Any = None, query: Any = None) -> str:
        """Generate a cache key for one call."""
        parts = [context.method.upper(), context.base_url, context.endpoint]
        if params:
            parts.append(json.dumps(params, sort_keys=True, default=str))
        if query:
            parts.append(json.dumps(query, sort_keys=True, default=str))
        raw = "|".join(parts)
        return hashlib.sha256(raw.encode()).hexdigest()


def cached(cache: ResponseCache) -> Effect:
    """Build an effect that serves GET replies from *cache*.

    Non-GET fetchers are returned unwrapped.
    """

    def effect(fetcher: FetcherCallable[Any], context: EffectContext) -> FetcherCallable[Any]:
        if context.method.upper() != "GET":
            return fetcher

        async def call(**kwargs: Any) -> Any:
            key = cache.make_key(context, kwargs.get("params"), kwargs.get("query"))
            hit, reply = cache.get(key)
            if hit:
                logger.debug("Cache hit for GET %s", context.endpoint)
                return reply
            reply = await fetcher(**kwargs)
            if reply is not None:
                cache.set(key, reply)
            return reply

        return call

    return effect

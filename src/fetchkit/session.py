"""Build a ready-to-use client from a saved :class:`~fetchkit.models.Profile`.

:func:`api_from_profile` loads the profile's schema and composes the effects
its settings ask for, outermost last:

1. auth (bearer token or API key, credential resolved once up front);
2. GET reply cache, when ``cache.enabled``;
3. retries, when ``request.max_retries > 0``;
4. the profile's named effects from the :class:`~fetchkit.effects.EffectRegistry`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fetchkit.api import make_api
from fetchkit.config import get_cache_dir, resolve_credential
from fetchkit.effects.auth import api_key_auth, bearer_auth
from fetchkit.effects.base import compose_effects
from fetchkit.effects.cache import ResponseCache, cached
from fetchkit.effects.registry import EffectRegistry
from fetchkit.effects.retry import retry
from fetchkit.exceptions import ConfigError
from fetchkit.loader import load_schema
from fetchkit.models import ApiSchema, AuthConfig, Profile
from fetchkit.transport.httpx_transport import HttpxTransport
from fetchkit.types import Effect, Endpoints


@dataclass
class ProfileApi:
    """An Endpoints Map together with the resources backing it.

    Use as an async context manager, or call :meth:`aclose`, to release the
    transport and the reply cache.
    """

    endpoints: Endpoints
    schema: ApiSchema
    transport: HttpxTransport
    cache: Optional[ResponseCache] = None

    async def __aenter__(self) -> ProfileApi:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()
        if self.cache is not None:
            self.cache.close()


def auth_effect(config: AuthConfig) -> Effect:
    """Resolve the credential described by *config* and build its effect.

    Raises:
        ConfigError: If the credential cannot be resolved, or an ``api_key``
            config names neither a header nor a query parameter.
    """
    secret = resolve_credential(config.source)
    if config.type == "bearer":
        return bearer_auth(secret)

    name = config.param_name if config.location == "query" else config.header
    if not name:
        raise ConfigError(
            f"api_key auth in {config.location} needs "
            f"{'param_name' if config.location == 'query' else 'header'}"
        )
    return api_key_auth(name, secret, config.location)


def api_from_profile(
    profile: Profile,
    *,
    registry: Optional[EffectRegistry] = None,
    transport: Optional[HttpxTransport] = None,
    dry_run: bool = False,
) -> ProfileApi:
    """Load *profile*'s schema and build its Endpoints Map.

    Args:
        profile: The profile to build from.
        registry: Registry for the profile's named effects. A fresh registry
            with entry-point discovery is used when omitted.
        transport: Transport override, mainly for tests.
        dry_run: Print requests instead of sending them.

    Raises:
        SchemaError: If the schema cannot be loaded.
        EffectError: If a named effect is unknown.
        ConfigError: If auth cannot be configured.
    """
    schema = load_schema(profile.schema_source)

    effects: list[Effect] = []
    if profile.auth is not None:
        effects.append(auth_effect(profile.auth))

    cache: Optional[ResponseCache] = None
    if profile.cache.enabled and not dry_run:
        cache = ResponseCache(get_cache_dir() / profile.name, profile.cache)
        effects.append(cached(cache))

    if profile.request.max_retries > 0:
        effects.append(retry(profile.request.max_retries, profile.request.retry_backoff))

    if profile.effects:
        if registry is None:
            registry = EffectRegistry()
            registry.discover()
        effects.append(registry.load(profile.effects))

    if transport is None:
        transport = HttpxTransport.from_config(profile.request, dry_run=dry_run)

    endpoints = make_api(
        schema,
        base_url=profile.base_url,
        effect=compose_effects(*effects) if effects else None,
        transport=transport,
    )
    return ProfileApi(endpoints=endpoints, schema=schema, transport=transport, cache=cache)

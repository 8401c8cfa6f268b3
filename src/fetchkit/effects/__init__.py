"""Effects -- build-time wrappers applied to every generated fetcher.

An effect has the signature ``(fetcher, context) -> callable`` (see
:data:`~fetchkit.types.Effect`). Built-ins:

* :func:`retry` -- exponential-backoff retries for network and 5xx failures.
* :func:`with_headers`, :func:`with_query`, :func:`bearer_auth`,
  :func:`api_key_auth` -- inject credentials or fixed values.
* :func:`cached` with :class:`ResponseCache` -- disk-backed GET cache.
* :func:`log_calls` -- per-call logging with timing.

:func:`compose_effects` chains several effects into one, and
:class:`EffectRegistry` resolves effects by name.
"""

from fetchkit.effects.auth import api_key_auth, bearer_auth, with_headers, with_query
from fetchkit.effects.base import EffectFetcher, apply_effect, compose_effects
from fetchkit.effects.cache import ResponseCache, cached
from fetchkit.effects.log import log_calls
from fetchkit.effects.registry import EffectRegistry
from fetchkit.effects.retry import retry

__all__ = [
    "EffectFetcher",
    "EffectRegistry",
    "ResponseCache",
    "api_key_auth",
    "apply_effect",
    "bearer_auth",
    "cached",
    "compose_effects",
    "log_calls",
    "retry",
    "with_headers",
    "with_query",
]

"""fetchkit -- typed async HTTP clients generated from endpoint schemas.

Declare which methods each endpoint supports, and :func:`make_api` returns a
callable per endpoint and method, each with a built-in ``abort()``. An
optional *effect* wraps every generated call (auth, retries, logging,
caching) without losing cancellation::

    from fetchkit import make_api, retry

    api = make_api(
        {"/users": ["get", "post"], "/users/:id": ["get", "delete"]},
        base_url="https://api.example.com",
        effect=retry(max_retries=2),
    )
    user = await api["/users/:id"]["get"](params={"id": "42"})

Modules:
    api: The builder, :func:`make_api`.
    fetcher: The request executor and ``abort()`` slot.
    effects: Effect composition and built-in effects.
    transport: The transport protocol and the httpx-backed default.
    templating: ``/users/:id`` path templates.
    models: Pydantic models for schemas and configuration.
    app: The ``fetchkit`` CLI.
"""

__version__ = "0.3.0"

from fetchkit.api import make_api  # noqa: E402
from fetchkit.effects import (  # noqa: E402
    EffectRegistry,
    ResponseCache,
    api_key_auth,
    bearer_auth,
    cached,
    compose_effects,
    log_calls,
    retry,
    with_headers,
    with_query,
)
from fetchkit.exceptions import (  # noqa: E402
    ConfigError,
    EffectError,
    FetchkitError,
    RequestError,
    SchemaError,
    TemplateError,
)
from fetchkit.fetcher import Fetcher, normalize_error  # noqa: E402
from fetchkit.loader import load_schema  # noqa: E402
from fetchkit.models import ApiSchema, EffectContext  # noqa: E402
from fetchkit.templating import compile_template  # noqa: E402
from fetchkit.transport import HttpxTransport, Transport, TransportRequest  # noqa: E402
from fetchkit.types import AbortableFetcher, Effect, Endpoints, FetcherCallable, Payload  # noqa: E402

__all__ = [
    "AbortableFetcher",
    "ApiSchema",
    "ConfigError",
    "Effect",
    "EffectContext",
    "EffectError",
    "EffectRegistry",
    "Endpoints",
    "Fetcher",
    "FetcherCallable",
    "FetchkitError",
    "HttpxTransport",
    "Payload",
    "RequestError",
    "ResponseCache",
    "SchemaError",
    "TemplateError",
    "Transport",
    "TransportRequest",
    "api_key_auth",
    "bearer_auth",
    "cached",
    "compile_template",
    "compose_effects",
    "load_schema",
    "log_calls",
    "make_api",
    "normalize_error",
    "retry",
    "with_headers",
    "with_query",
]

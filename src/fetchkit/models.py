"""Canonical Pydantic models shared across all fetchkit modules.

The models fall into two groups:

**Schema models** -- the validated, immutable form of an endpoint schema:
    :class:`ApiSchema` and :class:`EffectContext`.

**Configuration models** -- serialised as JSON profiles in the user's config
directory and consumed by the CLI and :func:`~fetchkit.session.api_from_profile`:
    :class:`AuthConfig`, :class:`RequestConfig`, :class:`CacheConfig` and
    :class:`Profile`.

The core builder never reads configuration; only the schema models flow
through :func:`~fetchkit.api.make_api`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fetchkit.exceptions import SchemaError


# --- Schema ---


class ApiSchema(BaseModel):
    """Validated endpoint schema: endpoint name -> tuple of method names.

    Each endpoint accepts either a sequence of method names or a mapping
    whose keys are the method names. Mapping values describe payload shapes
    and are trusted as-is, so only the keys are kept.

    Example::

        ApiSchema.parse({"/users/:id": ["get", "delete"], "/users": ["get", "post"]})
    """

    model_config = ConfigDict(frozen=True)

    endpoints: dict[str, tuple[str, ...]]

    @field_validator("endpoints", mode="before")
    @classmethod
    def _normalise_methods(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            raise ValueError(f"schema must be a mapping of endpoints, got {type(value).__name__}")
        result: dict[str, Any] = {}
        for endpoint, methods in value.items():
            if isinstance(methods, Mapping):
                methods = list(methods.keys())
            elif isinstance(methods, (set, frozenset)):
                # Sorted so the built map has a stable order.
                methods = sorted(methods, key=str)
            elif isinstance(methods, (str, bytes)) or not isinstance(methods, (list, tuple)):
                raise ValueError(
                    f"endpoint '{endpoint}': methods must be a list or set, got {methods!r}"
                )
            result[endpoint] = methods
        return result

    @field_validator("endpoints")
    @classmethod
    def _check_methods(cls, value: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        for endpoint, methods in value.items():
            if not endpoint:
                raise ValueError("endpoint names must be non-empty")
            if not methods:
                raise ValueError(f"endpoint '{endpoint}' declares no methods")
            seen: set[str] = set()
            for method in methods:
                if not method:
                    raise ValueError(f"endpoint '{endpoint}' declares an empty method name")
                if method in seen:
                    raise ValueError(f"endpoint '{endpoint}' declares method '{method}' more than once")
                seen.add(method)
        return value

    @classmethod
    def parse(cls, schema: Any) -> ApiSchema:
        """Validate *schema* into an :class:`ApiSchema`.

        Already-validated instances are returned unchanged.

        Raises:
            SchemaError: If the schema is malformed.
        """
        if isinstance(schema, cls):
            return schema
        try:
            return cls.model_validate({"endpoints": schema})
        except ValidationError as exc:
            messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())
            raise SchemaError(f"Invalid schema: {messages}") from exc

    def pairs(self) -> list[tuple[str, str]]:
        """Return every ``(endpoint, method)`` pair in declaration order."""
        return [(endpoint, method) for endpoint, methods in self.endpoints.items() for method in methods]


class EffectContext(BaseModel):
    """Identifies the fetcher an effect is wrapping."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    endpoint: str
    method: str


# --- Configuration ---


class AuthConfig(BaseModel):
    """Authentication injected into every call of a profile's API.

    Example::

        AuthConfig(type="api_key", header="X-API-Key", source="env:MY_API_KEY")
    """

    type: str = Field(description="Auth type: bearer, api_key")
    source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, value:LITERAL, prompt",
    )
    header: Optional[str] = Field(default=None, description="Header name for api_key auth")
    param_name: Optional[str] = Field(
        default=None, description="Query parameter name for api_key auth"
    )
    location: str = Field(default="header", description="Where to send: header, query")

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in ("bearer", "api_key"):
            raise ValueError(f"unsupported auth type '{value}' (expected bearer or api_key)")
        return value

    @field_validator("location")
    @classmethod
    def _known_location(cls, value: str) -> str:
        if value not in ("header", "query"):
            raise ValueError(f"unsupported auth location '{value}' (expected header or query)")
        return value


class RequestConfig(BaseModel):
    """HTTP request settings applied to every call in a profile."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=0, ge=0, description="Retry attempts for failed calls")
    retry_backoff: float = Field(
        default=1.0, ge=0, description="Initial retry delay in seconds, doubled per attempt"
    )


class CacheConfig(BaseModel):
    """GET reply cache settings."""

    enabled: bool = Field(default=False, description="Enable reply caching")
    ttl_seconds: int = Field(default=300, description="Cache TTL in seconds")


class Profile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    A profile names the schema to generate a client from and bundles the
    base URL, auth, request and cache settings plus the names of registered
    effects to apply.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    schema_source: str = Field(description="Path, URL or '-' for the endpoint schema")
    base_url: str = Field(description="Base URL every endpoint is resolved against")
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    effects: list[str] = Field(
        default_factory=list, description="Registered effect names, applied in order"
    )

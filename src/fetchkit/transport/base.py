"""The contract between a fetcher and the transport that performs its call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from fetchkit.abort import AbortSignal


@dataclass(frozen=True)
class TransportRequest:
    """One fully resolved HTTP request.

    Attributes:
        url: Absolute request URL (base URL joined with the rendered path).
        method: Upper-cased HTTP method.
        body: JSON-serialisable request body, or ``None``.
        query: Query parameters, or ``None``.
        headers: Extra request headers.
        with_credentials: Whether cookies are sent with the request.
    """

    url: str
    method: str
    body: Any = None
    query: Optional[Mapping[str, Any]] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    with_credentials: bool = True


class Transport(Protocol):
    """Performs one request and returns the decoded reply body.

    Implementations must run the network round trip through
    ``signal.run(...)`` so the call can be aborted, and must report failures
    as :class:`~fetchkit.exceptions.TransportError`.
    """

    async def perform_request(self, request: TransportRequest, signal: AbortSignal) -> Any: ...

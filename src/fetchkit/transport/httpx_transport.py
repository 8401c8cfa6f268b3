"""Asynchronous transport built on :class:`httpx.AsyncClient`.

:class:`HttpxTransport` turns a :class:`~fetchkit.transport.base.TransportRequest`
into one httpx round trip, run under the call's abort signal. It maps every
failure onto :class:`~fetchkit.exceptions.TransportError`:

* HTTP status >= 400 -- ``ERR_BAD_REQUEST`` (4xx) or ``ERR_BAD_RESPONSE`` (5xx),
  with the decoded error body attached;
* timeouts -- ``ECONNABORTED``;
* any other :class:`httpx.HTTPError` -- ``ERR_NETWORK``.

Credentials are the client's cookie jar, so cookies set by one reply are
sent on later calls. A request with ``with_credentials=False`` has its
``Cookie`` header stripped.

.. note::
   Retries and caching are deliberately absent here; they are effects
   (see :mod:`fetchkit.effects`).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from fetchkit.abort import AbortSignal
from fetchkit.exceptions import TransportError
from fetchkit.models import RequestConfig
from fetchkit.output import get_output
from fetchkit.transport.base import TransportRequest

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Default transport for generated clients.

    The underlying :class:`httpx.AsyncClient` is opened lazily on the first
    call, or eagerly when used as an async context manager. A client passed
    in by the caller is used as-is and is not closed by :meth:`aclose`.

    Args:
        client: Optional pre-built :class:`httpx.AsyncClient`.
        timeout: Request timeout in seconds (ignored when *client* is given).
        verify: Verify SSL certificates (ignored when *client* is given).
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic reply is returned without network I/O.

    Example::

        async with HttpxTransport(timeout=5) as transport:
            reply = await transport.perform_request(request, controller.signal)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 30,
        verify: bool = True,
        dry_run: bool = False,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify = verify
        self._dry_run = dry_run

    @classmethod
    def from_config(cls, config: RequestConfig, dry_run: bool = False) -> HttpxTransport:
        """Build a transport from a profile's :class:`~fetchkit.models.RequestConfig`."""
        return cls(timeout=config.timeout, verify=config.verify_ssl, dry_run=dry_run)

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the owned :class:`httpx.AsyncClient`, if one was opened."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport protocol
    # ------------------------------------------------------------------ #

    async def perform_request(self, request: TransportRequest, signal: AbortSignal) -> Any:
        """Send *request* and return the decoded reply body.

        Args:
            request: The resolved request.
            signal: Abort signal of the calling fetcher.

        Returns:
            The JSON-decoded body, the raw text when it is not JSON, or
            ``None`` for an empty body.

        Raises:
            RequestCancelled: If *signal* fired during the round trip.
            TransportError: On network failures and HTTP status >= 400.
        """
        if self._dry_run:
            return self._print_dry_run(request)

        client = self._ensure_client()
        http_request = client.build_request(
            request.method,
            request.url,
            params=_query_params(request.query),
            headers=dict(request.headers),
            **_body_kwargs(request.body),
        )
        if not request.with_credentials:
            http_request.headers.pop("cookie", None)

        try:
            response = await signal.run(client.send(http_request))
        except httpx.TimeoutException as exc:
            raise TransportError(str(exc) or None, code="ECONNABORTED") from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or None, code="ERR_NETWORK") from exc

        logger.debug("%s %s -> HTTP %s", request.method, request.url, response.status_code)

        if response.status_code >= 400:
            raise TransportError(
                f"Request failed with status code {response.status_code}",
                response_body=extract_response_data(response),
                status_code=response.status_code,
                code="ERR_BAD_REQUEST" if response.status_code < 500 else "ERR_BAD_RESPONSE",
            )
        return extract_response_data(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _print_dry_run(self, request: TransportRequest) -> Any:
        """Print request details to stderr and return a synthetic reply."""
        output = get_output()
        output.info(f"[dry-run] {request.method} {request.url}")

        for key, value in request.headers.items():
            output.info(f"  Header: {key}: {value}")

        for key, value in (request.query or {}).items():
            output.info(f"  Query: {key}={value}")

        if request.body is not None:
            output.info(f"  Body: {json.dumps(request.body, indent=2, default=str)}")

        return {"dry_run": True, "message": "Request was not sent"}


def extract_response_data(response: httpx.Response) -> Any:
    """Decode a response body: JSON first, raw text as fallback, ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _query_params(query: Any) -> Any:
    if not query:
        return None
    return {key: value for key, value in dict(query).items() if value is not None}


def _body_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (str, bytes)):
        return {"content": body}
    return {"json": body}

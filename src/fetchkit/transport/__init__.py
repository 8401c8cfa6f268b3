"""Transport layer for fetchkit.

A transport performs exactly one HTTP round trip for a fetcher. The core only
depends on the :class:`Transport` protocol; :class:`HttpxTransport` is the
default implementation, built on :class:`httpx.AsyncClient`.

Classes:
    :class:`TransportRequest` -- the request a fetcher hands to a transport.
    :class:`Transport` -- the protocol transports implement.
    :class:`HttpxTransport` -- httpx-backed transport with dry-run support.

Example::

    from fetchkit.transport import HttpxTransport

    async with HttpxTransport(timeout=10) as transport:
        api = make_api(schema, base_url="https://api.example.com", transport=transport)
"""

from fetchkit.transport.base import Transport, TransportRequest
from fetchkit.transport.httpx_transport import HttpxTransport

__all__ = ["Transport", "TransportRequest", "HttpxTransport"]

"""Request executor and fetcher factory.

A :class:`Fetcher` is bound to one ``(base_url, endpoint, method)`` triple
and performs one HTTP call per invocation:

1. the endpoint template is rendered with ``params`` and joined onto the
   base URL (a missing parameter raises
   :class:`~fetchkit.exceptions.TemplateError` straight away);
2. a fresh :class:`~fetchkit.abort.AbortController` is stored in the
   fetcher's slot so :meth:`Fetcher.abort` can reach the call;
3. the transport performs the round trip with credentials enabled;
4. the reply is returned unchanged.

An aborted call returns ``None``. Any other failure is re-raised as
:class:`~fetchkit.exceptions.RequestError` carrying one normalized value,
see :func:`normalize_error`.

.. note::
   The slot holds only the most recently started call. Starting a second
   call before the first settles means :meth:`Fetcher.abort` can no longer
   reach the first one; use separate fetchers for independently cancellable
   concurrent calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, Optional

from fetchkit.abort import AbortController
from fetchkit.exceptions import UNKNOWN_ERROR, RequestCancelled, RequestError, TransportError
from fetchkit.templating import compile_template, join_url
from fetchkit.transport.base import Transport, TransportRequest
from fetchkit.types import ReplyT

logger = logging.getLogger(__name__)


def normalize_error(exc: BaseException) -> Any:
    """Collapse a failure into the single value a failed call raises with.

    Priority: the ``error`` field of the response body, then the failure's
    message, then :data:`~fetchkit.exceptions.UNKNOWN_ERROR`. An empty
    message counts as absent.
    """
    body = getattr(exc, "response_body", None)
    if isinstance(body, Mapping) and body.get("error") is not None:
        return body["error"]

    message = exc.message if isinstance(exc, TransportError) else str(exc)
    if message:
        return message
    return UNKNOWN_ERROR


class Fetcher(Generic[ReplyT]):
    """Callable bound to one endpoint and method, with an ``abort()`` control.

    Args:
        base_url: Absolute URL every call is resolved against.
        endpoint: Endpoint path template, e.g. ``/users/:id``.
        method: HTTP method name as declared in the schema.
        transport: The transport that performs the round trip.
    """

    def __init__(self, base_url: str, endpoint: str, method: str, transport: Transport) -> None:
        self.base_url = base_url
        self.endpoint = endpoint
        self.method = method
        self._transport = transport
        self._render = compile_template(endpoint)
        self._controller: Optional[AbortController] = None

    def __repr__(self) -> str:
        return f"Fetcher({self.method.upper()} {self.endpoint!r})"

    async def __call__(
        self,
        *,
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Optional[ReplyT]:
        """Perform the call.

        Args:
            body: Request body.
            query: Query string parameters.
            params: Values for the endpoint's path parameters.
            headers: Extra request headers.

        Returns:
            The reply payload, or ``None`` if the call was aborted.

        Raises:
            TemplateError: If a required path parameter is missing.
            RequestError: If the call failed for any other reason.
        """
        url = join_url(self.base_url, self._render(params))

        controller = AbortController()
        self._controller = controller
        request = TransportRequest(
            url=url,
            method=self.method.upper(),
            body=body,
            query=query,
            headers=dict(headers or {}),
            with_credentials=True,
        )

        logger.debug("%s %s", request.method, url)
        try:
            return await self._transport.perform_request(request, controller.signal)
        except RequestCancelled:
            logger.debug("%s %s aborted", request.method, url)
            return None
        except Exception as exc:
            error = normalize_error(exc)
            logger.debug("%s %s failed: %r", request.method, url, error)
            raise RequestError(error, status_code=getattr(exc, "status_code", None)) from exc
        finally:
            if self._controller is controller:
                self._controller = None

    def abort(self) -> None:
        """Cancel the most recently started call if it is still in flight."""
        if self._controller is None:
            return
        self._controller.abort()


def fetcher(base_url: str, endpoint: str, method: str, transport: Transport) -> Fetcher[Any]:
    """Build a :class:`Fetcher` for one ``(endpoint, method)`` pair."""
    return Fetcher(base_url, endpoint, method, transport)

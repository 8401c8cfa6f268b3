"""Static typing surface for generated clients.

Python cannot derive call signatures from a runtime schema, so the payload
shape of each endpoint+method is declared with :class:`Payload` and carried
by the generic :class:`FetcherCallable` / :class:`AbortableFetcher`
protocols. Nothing in this module is checked at runtime.

Example::

    class GetUser(Payload):
        Params: dict[str, str]
        Reply: User

    get_user: AbortableFetcher[User] = api["/users/:id"]["get"]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Protocol, TypedDict, TypeVar

from typing_extensions import Required

from fetchkit.models import EffectContext

ReplyT = TypeVar("ReplyT")
ReplyT_co = TypeVar("ReplyT_co", covariant=True)


class Payload(TypedDict, total=False):
    """The five facets of one endpoint+method. Only ``Reply`` is required."""

    Body: Any
    Querystring: Any
    Params: dict[str, str]
    Headers: dict[str, str]
    Reply: Required[Any]


class FetcherCallable(Protocol[ReplyT_co]):
    """Call signature shared by fetchers and the callables effects return.

    Resolves to the reply, or ``None`` when the call was aborted.
    """

    def __call__(
        self,
        *,
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Awaitable[Optional[ReplyT_co]]: ...


class AbortableFetcher(FetcherCallable[ReplyT_co], Protocol):
    """A :class:`FetcherCallable` that also exposes ``abort()``."""

    def abort(self) -> None: ...


Effect = Callable[[AbortableFetcher[Any], EffectContext], FetcherCallable[Any]]
"""Build-time transformation applied to every generated fetcher."""

Methods = Mapping[str, AbortableFetcher[Any]]
Endpoints = Mapping[str, Methods]

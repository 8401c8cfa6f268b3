"""Effect composition.

An *effect* is a build-time transformation ``(fetcher, context) -> callable``
applied once to every generated fetcher. The callable it returns must accept
the same keyword arguments as the fetcher; it does not need to preserve
``abort``. :func:`~fetchkit.api.make_api` wraps whatever the effect returns
in an :class:`EffectFetcher`, which re-attaches the original fetcher's
``abort`` so cancellation always reaches the real in-flight call.

Example::

    def shout(fetcher, context):
        async def call(**kwargs):
            reply = await fetcher(**kwargs)
            return reply.upper() if isinstance(reply, str) else reply
        return call

    api = make_api(schema, base_url=url, effect=compose_effects(log_calls(), shout))
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from fetchkit.models import EffectContext
from fetchkit.types import AbortableFetcher, Effect, FetcherCallable


class EffectFetcher:
    """An effect's callable with the original fetcher's ``abort`` attached.

    Args:
        call: The callable returned by the effect.
        abort: The ``abort`` of the fetcher the effect wrapped.
        context: Which endpoint/method this fetcher serves.
    """

    def __init__(
        self,
        call: FetcherCallable[Any],
        abort: Callable[[], None],
        context: EffectContext,
    ) -> None:
        self._call = call
        self.abort = abort
        self.context = context

    def __repr__(self) -> str:
        return f"EffectFetcher({self.context.method.upper()} {self.context.endpoint!r})"

    def __call__(self, **kwargs: Any) -> Any:
        return self._call(**kwargs)


def apply_effect(
    effect: Optional[Effect],
    fetcher: AbortableFetcher[Any],
    context: EffectContext,
) -> AbortableFetcher[Any]:
    """Run *effect* over *fetcher* and re-attach the original ``abort``.

    Returns *fetcher* unchanged when *effect* is ``None``.
    """
    if effect is None:
        return fetcher
    abort = fetcher.abort
    return EffectFetcher(effect(fetcher, context), abort, context)


def compose_effects(*effects: Effect) -> Effect:
    """Fold *effects* left to right into a single effect.

    The first effect wraps the raw fetcher; each following effect wraps the
    callable produced by the previous one. All receive the same context.
    """

    def composed(fetcher: AbortableFetcher[Any], context: EffectContext) -> FetcherCallable[Any]:
        current: Any = fetcher
        for effect in effects:
            current = effect(current, context)
        return current

    return composed

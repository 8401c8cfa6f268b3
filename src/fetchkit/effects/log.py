"""Effect that logs every call with its outcome and duration."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from fetchkit.exceptions import RequestError
from fetchkit.models import EffectContext
from fetchkit.types import Effect, FetcherCallable


def log_calls(logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> Effect:
    """Build an effect that logs start, completion, abort and failure of calls.

    Args:
        logger: Logger to write to. Defaults to ``fetchkit.calls``.
        level: Level for start/finish records. Failures always log at
            ``WARNING``.
    """
    log = logger or logging.getLogger("fetchkit.calls")

    def effect(fetcher: FetcherCallable[Any], context: EffectContext) -> FetcherCallable[Any]:
        label = f"{context.method.upper()} {context.endpoint}"

        async def call(**kwargs: Any) -> Any:
            log.log(level, "%s started", label)
            started = time.monotonic()
            try:
                reply = await fetcher(**kwargs)
            except RequestError as exc:
                log.warning("%s failed after %.3fs: %s", label, time.monotonic() - started, exc.error)
                raise
            elapsed = time.monotonic() - started
            if reply is None:
                log.log(level, "%s finished with no reply in %.3fs", label, elapsed)
            else:
                log.log(level, "%s finished in %.3fs", label, elapsed)
            return reply

        return call

    return effect

"""Retry effect with exponential backoff.

Failed calls whose :class:`~fetchkit.exceptions.RequestError` has no status
(network failures, timeouts) or a retryable status (5xx by default) are
retried up to ``max_retries`` times. The delay doubles each attempt:
``backoff``, ``2 * backoff``, ``4 * backoff``, ...

Aborted calls resolve to ``None`` and are never retried;
:class:`~fetchkit.exceptions.TemplateError` propagates immediately.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Container
from typing import Any, Optional

from fetchkit.exceptions import RequestError
from fetchkit.models import EffectContext
from fetchkit.types import Effect, FetcherCallable

logger = logging.getLogger(__name__)

SERVER_ERRORS = range(500, 600)


def _should_retry(exc: RequestError, retry_statuses: Container[int]) -> bool:
    return exc.status_code is None or exc.status_code in retry_statuses


def retry(
    max_retries: int = 3,
    backoff: float = 1.0,
    retry_statuses: Optional[Container[int]] = None,
) -> Effect:
    """Build an effect that retries failed calls.

    Args:
        max_retries: Extra attempts after the first failure.
        backoff: Delay before the first retry, in seconds.
        retry_statuses: HTTP statuses worth retrying. Defaults to 5xx.

    Returns:
        An :data:`~fetchkit.types.Effect`.
    """
    statuses = SERVER_ERRORS if retry_statuses is None else retry_statuses

    def effect(fetcher: FetcherCallable[Any], context: EffectContext) -> FetcherCallable[Any]:
        async def call(**kwargs: Any) -> Any:
            attempt = 0
            while True:
                try:
                    return await fetcher(**kwargs)
                except RequestError as exc:
                    if attempt >= max_retries or not _should_retry(exc, statuses):
                        raise
                    delay = backoff * 2 ** attempt
                    logger.warning(
                        "%s %s failed (%s), retrying in %ss (attempt %d/%d)",
                        context.method.upper(),
                        context.endpoint,
                        exc.error,
                        delay,
                        attempt + 1,
                        max_retries,
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return call

    return effect

# infra/retry.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Optional, Tuple, Type

import aiohttp

from infra.metrics import METRICS

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUSES: FrozenSet[int] = frozenset({429, 500, 502, 503, 504})
TRANSPORT_ERRORS: Tuple[Type[BaseException], ...] = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


@dataclass(frozen=True)
class RetryOptions:
    attempts: int = 3
    base_delay_s: float = 0.2
    retry_statuses: FrozenSet[int] = DEFAULT_RETRY_STATUSES
    retry_on: Tuple[Type[BaseException], ...] = TRANSPORT_ERRORS

    def __post_init__(self) -> None:
        if int(self.attempts) < 1:
            raise ValueError("attempts must be >= 1")
        if float(self.base_delay_s) < 0:
            raise ValueError("base_delay_s must be >= 0")


async def fetch_with_retry(
    operation: Callable[[], Awaitable[Any]],
    options: Optional[RetryOptions] = None,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Any:
    """Run `operation` with exponential backoff on transient failures.

    `operation` performs one outbound call and returns a response-like object
    exposing `.status`. A retryable status or a transport fault triggers a wait
    of `base_delay_s * 2**retries` before the next attempt. The final attempt's
    response is returned as-is, even when its status is retryable. If no
    attempt produced a response, the last fault is re-raised.
    """
    opts = options or RetryOptions()
    attempts = int(opts.attempts)
    retries = 0

    for attempt in range(attempts):
        final = attempt == attempts - 1
        try:
            response = await operation()
        except opts.retry_on as e:
            if final:
                raise
            delay = float(opts.base_delay_s) * (2 ** retries)
            retries += 1
            logger.debug("attempt %d/%d failed (%s: %s), retrying in %.3fs", attempt + 1, attempts, type(e).__name__, e, delay)
            METRICS.inc("retry_waits_total", 1)
            await sleep(delay)
            continue

        status = getattr(response, "status", None)
        if final or status not in opts.retry_statuses:
            return response

        delay = float(opts.base_delay_s) * (2 ** retries)
        retries += 1
        logger.debug("attempt %d/%d got http_%s, retrying in %.3fs", attempt + 1, attempts, status, delay)
        METRICS.inc("retry_waits_total", 1)
        METRICS.inc_reason("retry_by_status", str(status), 1)
        await sleep(delay)

    raise RuntimeError("retry loop exited without a result")

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

from aggregator.providers.base import QuoteProvider
from infra.metrics import METRICS

logger = logging.getLogger(__name__)

OK = "ok"
ABSENT = "absent"
FAULT = "fault"

R = TypeVar("R")


@dataclass(frozen=True)
class ProviderOutcome(Generic[R]):
    provider: str
    status: str
    result: Optional[R] = None
    error: Optional[str] = None
    latency_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == OK


async def _timed(provider: QuoteProvider, request: Any) -> Tuple[Any, Optional[Exception], float]:
    t0 = time.perf_counter()
    try:
        result = await provider.quote(request)
    except Exception as e:
        return None, e, (time.perf_counter() - t0) * 1000.0
    return result, None, (time.perf_counter() - t0) * 1000.0


async def settle_all(providers: Sequence[QuoteProvider], request: Any, *, kind: str = "quote") -> List[ProviderOutcome]:
    """Run every provider's `quote` concurrently and wait for all of them.

    No short-circuit on the first failure or the first success. Outcomes come
    back in the order of `providers`, whatever order they settled in.
    """
    if not providers:
        return []

    results = await asyncio.gather(*(_timed(p, request) for p in providers), return_exceptions=True)

    outcomes: List[ProviderOutcome] = []
    for provider, r in zip(providers, results):
        if isinstance(r, BaseException):
            # CancelledError, KeyboardInterrupt
            raise r
        name = provider.name
        result, err, dt_ms = r
        if err is not None:
            logger.warning("%s provider %s failed: %s: %s", kind, name, type(err).__name__, err)
            outcome = ProviderOutcome(provider=name, status=FAULT, error=f"{type(err).__name__}: {err}", latency_ms=dt_ms)
        elif result is None:
            logger.debug("%s provider %s declined", kind, name)
            outcome = ProviderOutcome(provider=name, status=ABSENT, latency_ms=dt_ms)
        else:
            outcome = ProviderOutcome(provider=name, status=OK, result=result, latency_ms=dt_ms)
        METRICS.record_outcome(kind, name, outcome.status, outcome.latency_ms)
        outcomes.append(outcome)
    return outcomes


def successful(outcomes: Sequence[ProviderOutcome]) -> List[Any]:
    return [o.result for o in outcomes if o.ok]

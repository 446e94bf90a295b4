from __future__ import annotations

import math
from collections import Counter, defaultdict, deque
from typing import Any, Deque, Dict, List, Optional

LATENCY_WINDOW = 500


def _nearest_rank(sorted_vals: List[float], pct: float) -> Optional[float]:
    if not sorted_vals:
        return None
    idx = max(1, math.ceil(pct / 100.0 * len(sorted_vals))) - 1
    return sorted_vals[idx]


class Metrics:
    """Provider fan-out counters plus a sliding latency window per provider.

    Only touched from the event loop thread.
    """

    def __init__(self) -> None:
        self._counters: Counter = Counter()
        self._reasons: Dict[str, Counter] = defaultdict(Counter)
        self._latency: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=LATENCY_WINDOW))

    def reset(self) -> None:
        self._counters.clear()
        self._reasons.clear()
        self._latency.clear()

    def inc(self, name: str, n: int = 1) -> None:
        self._counters[name] += n

    def inc_reason(self, group: str, reason: str, n: int = 1) -> None:
        self._reasons[group][reason] += n

    def record_outcome(self, kind: str, provider: str, outcome: str, latency_ms: float) -> None:
        self.inc("provider_calls_total")
        self.inc_reason("provider_outcomes", f"{kind}:{outcome}")
        if outcome != "ok":
            self.inc_reason(f"provider_failures:{kind}", provider)
        if not math.isnan(latency_ms):
            self._latency[provider].append(float(latency_ms))

    def counter(self, name: str) -> int:
        return self._counters[name]

    def reasons(self, group: str) -> Dict[str, int]:
        return dict(self._reasons.get(group, {}))

    def latency(self, provider: str) -> Dict[str, Any]:
        vals = sorted(self._latency.get(provider, ()))
        return {"count": len(vals), "p50": _nearest_rank(vals, 50), "p95": _nearest_rank(vals, 95)}

    def snapshot(self) -> Dict[str, Any]:
        return {
            "counters": dict(self._counters),
            "reason_counters": {group: dict(c) for group, c in self._reasons.items()},
            "latency_ms": {p: self.latency(p) for p in self._latency},
        }


METRICS = Metrics()

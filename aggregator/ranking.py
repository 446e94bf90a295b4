from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

from aggregator.amounts import savings_summary
from aggregator.types import FlashLoanResult

T = TypeVar("T")


def _out(result: object) -> int:
    return int(getattr(result, "to_amount"))


def rank_by_output(results: Sequence[T]) -> List[T]:
    """Descending by integer `to_amount`. `sorted` is stable, so equal outputs keep input order."""
    return sorted(results, key=_out, reverse=True)


def rank_by_fee(results: Sequence[FlashLoanResult]) -> List[FlashLoanResult]:
    """Ascending by integer fee, stable."""
    return sorted(results, key=lambda r: int(r.fee))


def all_zero_output(results: Sequence[object]) -> bool:
    return bool(results) and all(_out(r) == 0 for r in results)


def select_best(ranked: Sequence[T]) -> Tuple[T, str, float]:
    """Winner of an output-ranked list with savings against the tail."""
    best = ranked[0]
    worst = ranked[-1]
    saved, pct = savings_summary(_out(best), _out(worst))
    return best, saved, pct

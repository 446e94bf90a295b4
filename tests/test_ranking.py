from __future__ import annotations

from dataclasses import dataclass
from typing import List

from aggregator.ranking import all_zero_output, rank_by_fee, rank_by_output, select_best


@dataclass(frozen=True)
class Q:
    name: str
    to_amount: str


@dataclass(frozen=True)
class F:
    name: str
    fee: str


def _names(items: List) -> List[str]:
    return [i.name for i in items]


def test_rank_by_output_descending() -> None:
    ranked = rank_by_output([Q("a", "5"), Q("b", "50"), Q("c", "7")])
    assert _names(ranked) == ["b", "c", "a"]
    outs = [int(q.to_amount) for q in ranked]
    assert outs == sorted(outs, reverse=True)


def test_rank_by_output_compares_integers_not_strings() -> None:
    ranked = rank_by_output([Q("short", "9"), Q("long", "10")])
    assert _names(ranked) == ["long", "short"]


def test_ties_keep_input_order() -> None:
    ranked = rank_by_output([Q("first", "100"), Q("second", "100"), Q("third", "100")])
    assert _names(ranked) == ["first", "second", "third"]
    best, saved, pct = select_best(ranked)
    assert best.name == "first"
    assert saved == "0"
    assert pct == 0.0


def test_single_result_has_zero_savings() -> None:
    best, saved, pct = select_best([Q("only", "12345")])
    assert best.name == "only"
    assert saved == "0"
    assert pct == 0.0


def test_huge_amounts_one_unit_apart() -> None:
    ranked = rank_by_output([Q("lo", "100000000000000000000000000"), Q("hi", "100000000000000000000000001")])
    best, saved, _pct = select_best(ranked)
    assert best.name == "hi"
    assert saved == "1"


def test_rank_by_fee_ascending_stable() -> None:
    ranked = rank_by_fee([F("aave", "50"), F("dydx", "0"), F("balancer", "0")])
    assert _names(ranked) == ["dydx", "balancer", "aave"]


def test_all_zero_output() -> None:
    assert all_zero_output([Q("a", "0"), Q("b", "0")])
    assert not all_zero_output([Q("a", "0"), Q("b", "1")])
    assert not all_zero_output([])

from __future__ import annotations

import re
from typing import Tuple, Union

BPS = 10_000

_AMOUNT = re.compile(r"[0-9]+")


def is_integer_string(value: object) -> bool:
    """True for a base-10 non-negative integer string: no sign, point or exponent."""
    return isinstance(value, str) and bool(_AMOUNT.fullmatch(value))


def parse_amount(value: Union[str, int]) -> int:
    """Decimal-integer string -> int. Never goes through float."""
    if isinstance(value, bool):
        raise ValueError(f"invalid amount: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"amount must be non-negative: {value}")
        return value
    if not is_integer_string(value):
        raise ValueError(f"amount must be a non-negative integer string: {value!r}")
    return int(value)


def apply_spread(amount: int, spread_bps: int) -> int:
    """Deduct `spread_bps` from `amount`, rounding down."""
    bps = max(0, min(BPS, int(spread_bps)))
    return int(amount) * (BPS - bps) // BPS


def bps_of(amount: int, bps: int) -> int:
    """floor(amount * bps / 10000)"""
    if int(bps) <= 0:
        return 0
    return int(amount) * int(bps) // BPS


def savings(best_out: int, worst_out: int) -> int:
    return max(0, int(best_out) - int(worst_out))


def savings_percent(saved: int, worst_out: int) -> float:
    """Savings as a percentage of the worst output, two decimals, integer math.

    The bps value is an exact int; only the final /100 for display is a float,
    and that value is already small and bounded.
    """
    if int(worst_out) == 0:
        return 0.0
    scaled = int(saved) * BPS // int(worst_out)
    return scaled / 100


def savings_summary(best_out: int, worst_out: int) -> Tuple[str, float]:
    saved = savings(best_out, worst_out)
    return str(saved), savings_percent(saved, worst_out)


def price_impact_percent(amount: int, liquidity: int, decimals: int = 18, cap_percent: int = 50) -> float:
    """Estimated price impact: (amount / 10**decimals) / liquidity * 100, capped.

    Computed in hundredths of a percent so huge amounts stay exact.
    """
    if int(liquidity) <= 0:
        return float(cap_percent)
    hundredths = int(amount) * 100 * 100 // (int(liquidity) * 10 ** int(decimals))
    return min(hundredths, int(cap_percent) * 100) / 100


def format_units(value: int, decimals: int = 18, places: int = 4) -> str:
    """Render base units as a fixed-point decimal string, truncating extra digits."""
    v = int(value)
    sign = "-" if v < 0 else ""
    v = abs(v)
    whole, frac = divmod(v, 10 ** int(decimals))
    if places <= 0:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(int(decimals), "0")[: int(places)].ljust(int(places), "0")
    return f"{sign}{whole}.{frac_str}"

from __future__ import annotations

from typing import Optional, Union

from aggregator import config
from aggregator.amounts import bps_of, parse_amount
from aggregator.types import PlatformFeeInfo


def calc_platform_fee(amount: Union[str, int], bps: int, recipient: Optional[str]) -> PlatformFeeInfo:
    """Platform fee on `amount` (input token base units).

    Pure: rate and recipient are passed in. A malformed amount raises ValueError.
    """
    bps = int(bps)
    if bps < 0 or bps > config.MAX_FEE_BPS:
        raise ValueError(f"fee bps must be within 0..{config.MAX_FEE_BPS}: {bps}")
    value = parse_amount(amount)
    return PlatformFeeInfo(
        fee_bps=bps,
        fee_percent=bps / 100,
        fee_amount=str(bps_of(value, bps)),
        recipient=recipient,
    )


def configured_platform_fee(amount: Union[str, int]) -> PlatformFeeInfo:
    """Platform fee using PLATFORM_FEE_BPS / PLATFORM_FEE_RECIPIENT as currently set."""
    return calc_platform_fee(amount, config.platform_fee_bps(), config.platform_fee_recipient())

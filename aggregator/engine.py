"""Quote aggregation entry points.

Each entry point checks its preconditions, narrows the provider registry,
fans the request out to every selected provider, waits for all of them, and
ranks whatever came back. Individual provider failures never reach the
caller; only the ranked aggregate or one of the `QuoteError` conditions does.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional

from aggregator import config
from aggregator.errors import (
    AllZeroOutput,
    InsufficientLiquidity,
    NoQuotes,
    SameChain,
    UnsupportedChain,
)
from aggregator.fanout import settle_all, successful
from aggregator.fees import configured_platform_fee
from aggregator.providers.base import CrossChainProvider, FlashLoanProvider, SwapProvider
from aggregator.ranking import all_zero_output, rank_by_fee, rank_by_output, select_best
from aggregator.registry import (
    build_cross_chain_providers,
    build_flash_loan_providers,
    build_swap_providers,
    select_providers,
)
from aggregator.types import (
    BestCrossChainQuote,
    BestFlashLoan,
    BestQuote,
    CrossChainQuoteRequest,
    FlashLoanRequest,
    QuoteRequest,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def swap_registry() -> Dict[str, SwapProvider]:
    return build_swap_providers()


@lru_cache(maxsize=None)
def cross_chain_registry() -> Dict[str, CrossChainProvider]:
    return build_cross_chain_providers()


@lru_cache(maxsize=None)
def flash_loan_registry() -> Dict[str, FlashLoanProvider]:
    return build_flash_loan_providers()


async def close_providers() -> None:
    """Give every provider in the default registries a chance to release resources."""
    for registry in (swap_registry(), cross_chain_registry(), flash_loan_registry()):
        for provider in registry.values():
            await provider.close()


async def get_quotes(
    request: QuoteRequest,
    *,
    registry: Optional[Dict[str, SwapProvider]] = None,
    platform_fee: bool = True,
) -> BestQuote:
    if int(request.chain_id) not in config.SUPPORTED_CHAINS:
        raise UnsupportedChain(request.chain_id)

    providers = select_providers(
        registry if registry is not None else swap_registry(),
        chain_id=request.chain_id,
        allowed=request.allowed_providers,
        kind="swap",
        filter_chain=False,
    )
    outcomes = await settle_all(providers, request, kind="swap")
    quotes = successful(outcomes)

    if not quotes:
        logger.info("swap %s->%s on chain %s: no quotes", request.from_token, request.to_token, request.chain_id)
        raise NoQuotes("swap")
    if all_zero_output(quotes):
        logger.info("swap %s->%s on chain %s: all outputs zero", request.from_token, request.to_token, request.chain_id)
        raise AllZeroOutput()

    ranked = rank_by_output(quotes)
    best, saved, pct = select_best(ranked)
    logger.info(
        "swap %s->%s on chain %s: best=%s out=%s (%d/%d providers)",
        request.from_token, request.to_token, request.chain_id, best.aggregator, best.to_amount, len(quotes), len(providers),
    )
    return BestQuote(
        best=best,
        savings=saved,
        savings_percent=pct,
        all_quotes=ranked,
        platform_fee=configured_platform_fee(request.amount) if platform_fee else None,
    )


async def get_cross_chain_quotes(
    request: CrossChainQuoteRequest,
    *,
    registry: Optional[Dict[str, CrossChainProvider]] = None,
) -> BestCrossChainQuote:
    supported = config.CROSS_CHAIN_SUPPORTED_CHAINS
    if int(request.from_chain_id) not in supported:
        raise UnsupportedChain(request.from_chain_id, role="source")
    if int(request.to_chain_id) not in supported:
        raise UnsupportedChain(request.to_chain_id, role="destination")
    if int(request.from_chain_id) == int(request.to_chain_id):
        raise SameChain(request.from_chain_id)

    providers = select_providers(
        registry if registry is not None else cross_chain_registry(),
        chain_id=request.from_chain_id,
        allowed=request.allowed_providers,
        kind="cross_chain",
    )
    outcomes = await settle_all(providers, request, kind="cross_chain")
    quotes = successful(outcomes)

    if not quotes:
        logger.info("cross-chain %s->%s: no quotes", request.from_chain_id, request.to_chain_id)
        raise NoQuotes("cross_chain")

    ranked = rank_by_output(quotes)
    best, saved, pct = select_best(ranked)
    logger.info(
        "cross-chain %s->%s: best=%s via %s out=%s",
        request.from_chain_id, request.to_chain_id, best.aggregator, best.bridge_used, best.to_amount,
    )
    return BestCrossChainQuote(best=best, savings=saved, savings_percent=pct, all_quotes=ranked)


async def get_flash_loan_quotes(
    request: FlashLoanRequest,
    *,
    registry: Optional[Dict[str, FlashLoanProvider]] = None,
    platform_fee: bool = True,
) -> BestFlashLoan:
    providers = select_providers(
        registry if registry is not None else flash_loan_registry(),
        chain_id=request.chain_id,
        allowed=[request.provider] if request.provider else None,
        kind="flashloan",
    )
    outcomes = await settle_all(providers, request, kind="flashloan")
    results = successful(outcomes)

    if not results:
        logger.info("flashloan %s on chain %s: no quotes", request.asset, request.chain_id)
        raise NoQuotes("flashloan")

    ranked = rank_by_fee(results)
    available = [r for r in ranked if r.available]
    if not available:
        logger.info("flashloan %s on chain %s: insufficient liquidity everywhere", request.asset, request.chain_id)
        raise InsufficientLiquidity(request.asset, request.chain_id)

    best = available[0]
    logger.info("flashloan %s on chain %s: best=%s fee=%s", request.asset, request.chain_id, best.provider, best.fee)
    return BestFlashLoan(
        best=best,
        all=ranked,
        platform_fee=configured_platform_fee(request.amount) if platform_fee else None,
    )

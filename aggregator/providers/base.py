from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from aggregator.types import (
    CrossChainQuoteRequest,
    CrossChainQuoteResult,
    FlashLoanRequest,
    FlashLoanResult,
    QuoteRequest,
    QuoteResult,
)


class QuoteProvider:
    """One independent price/liquidity source.

    `quote` returns None for ordinary "no liquidity" / "unsupported pair"
    conditions. Raising is reserved for programming errors; the fan-out
    treats a raise like None.
    """

    name: str
    kind: str = "quote"
    supported_chains: FrozenSet[int] = frozenset()

    def supports_chain(self, chain_id: int) -> bool:
        return int(chain_id) in self.supported_chains

    async def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def chain_set(chains: Iterable[int]) -> FrozenSet[int]:
    return frozenset(int(c) for c in chains)


class SwapProvider(QuoteProvider):
    kind = "swap"

    async def quote(self, request: QuoteRequest) -> Optional[QuoteResult]:
        raise NotImplementedError


class CrossChainProvider(QuoteProvider):
    kind = "cross_chain"

    async def quote(self, request: CrossChainQuoteRequest) -> Optional[CrossChainQuoteResult]:
        raise NotImplementedError


class FlashLoanProvider(QuoteProvider):
    kind = "flashloan"

    async def quote(self, request: FlashLoanRequest) -> Optional[FlashLoanResult]:
        raise NotImplementedError

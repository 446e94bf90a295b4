from __future__ import annotations

from typing import Optional


class QuoteError(Exception):
    """Base for every structured failure the engine reports to its caller."""


class InvalidRequest(QuoteError):
    """Raised by the boundary validator before the engine is invoked."""


class UnsupportedChain(QuoteError):
    def __init__(self, chain_id: int, role: Optional[str] = None):
        self.chain_id = int(chain_id)
        self.role = role
        if role == "source":
            msg = f"Source chain {chain_id} is not supported for cross-chain swaps"
        elif role == "destination":
            msg = f"Destination chain {chain_id} is not supported for cross-chain swaps"
        else:
            msg = f"Chain {chain_id} is not supported"
        super().__init__(msg)


class SameChain(QuoteError):
    def __init__(self, chain_id: int):
        self.chain_id = int(chain_id)
        super().__init__(
            "fromChainId and toChainId must differ; use the single-chain quote path for same-chain swaps"
        )


class NoProvidersForChain(QuoteError):
    def __init__(self, chain_id: int, kind: str = "quote"):
        self.chain_id = int(chain_id)
        self.kind = kind
        if kind == "flashloan":
            msg = f"No flash loan providers available on chain {chain_id}"
        else:
            msg = f"No {kind} providers available on chain {chain_id}"
        super().__init__(msg)


class NoQuotes(QuoteError):
    def __init__(self, kind: str = "swap"):
        self.kind = kind
        if kind == "cross_chain":
            msg = "No cross-chain quotes available"
        elif kind == "flashloan":
            msg = "No flash loan quotes available"
        else:
            msg = "No quotes available from any aggregator"
        super().__init__(msg)


class AllZeroOutput(QuoteError):
    def __init__(self) -> None:
        super().__init__("All aggregators returned zero output; the token pair may not be supported")


class InsufficientLiquidity(QuoteError):
    def __init__(self, asset: str, chain_id: int):
        self.asset = asset
        self.chain_id = int(chain_id)
        super().__init__(
            f"No flash loan providers with sufficient liquidity for asset {asset} on chain {chain_id}"
        )

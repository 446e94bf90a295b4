from aggregator.providers.base import CrossChainProvider, FlashLoanProvider, QuoteProvider, SwapProvider
from aggregator.providers.cross_chain import BridgeAdapter
from aggregator.providers.flashloan import FlashLoanPool
from aggregator.providers.swap import FixedSpreadAdapter, UniswapRoutingAdapter

__all__ = [
    "QuoteProvider",
    "SwapProvider",
    "CrossChainProvider",
    "FlashLoanProvider",
    "FixedSpreadAdapter",
    "UniswapRoutingAdapter",
    "BridgeAdapter",
    "FlashLoanPool",
]

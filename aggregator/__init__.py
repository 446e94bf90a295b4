from aggregator.engine import get_cross_chain_quotes, get_flash_loan_quotes, get_quotes
from aggregator.errors import (
    AllZeroOutput,
    InsufficientLiquidity,
    InvalidRequest,
    NoProvidersForChain,
    NoQuotes,
    QuoteError,
    SameChain,
    UnsupportedChain,
)
from aggregator.fees import calc_platform_fee
from aggregator.types import (
    BestCrossChainQuote,
    BestFlashLoan,
    BestQuote,
    CrossChainQuoteRequest,
    CrossChainQuoteResult,
    FlashLoanRequest,
    FlashLoanResult,
    PlatformFeeInfo,
    QuoteRequest,
    QuoteResult,
)

__all__ = [
    "get_quotes",
    "get_cross_chain_quotes",
    "get_flash_loan_quotes",
    "calc_platform_fee",
    "QuoteError",
    "InvalidRequest",
    "UnsupportedChain",
    "SameChain",
    "NoProvidersForChain",
    "NoQuotes",
    "AllZeroOutput",
    "InsufficientLiquidity",
    "QuoteRequest",
    "CrossChainQuoteRequest",
    "FlashLoanRequest",
    "QuoteResult",
    "CrossChainQuoteResult",
    "FlashLoanResult",
    "BestQuote",
    "BestCrossChainQuote",
    "BestFlashLoan",
    "PlatformFeeInfo",
]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Token:
    address: str
    chain_id: int
    symbol: str
    name: str
    decimals: int
    logo_uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "address": self.address,
            "chainId": int(self.chain_id),
            "symbol": self.symbol,
            "name": self.name,
            "decimals": int(self.decimals),
        }
        if self.logo_uri:
            out["logoURI"] = self.logo_uri
        return out


@dataclass(frozen=True)
class QuoteRequest:
    from_token: str
    to_token: str
    amount: str
    chain_id: int
    slippage_percent: Optional[float] = None
    allowed_providers: Optional[List[str]] = None


@dataclass(frozen=True)
class CrossChainQuoteRequest:
    from_chain_id: int
    to_chain_id: int
    from_token: str
    to_token: str
    amount: str
    from_address: str
    to_address: Optional[str] = None
    slippage_percent: Optional[float] = None
    allowed_providers: Optional[List[str]] = None

    @property
    def recipient(self) -> str:
        return self.to_address or self.from_address


@dataclass(frozen=True)
class FlashLoanRequest:
    asset: str
    amount: str
    chain_id: int
    target_contract: str
    params: str = "0x"
    provider: Optional[str] = None


@dataclass(frozen=True)
class RouteStep:
    protocol: str
    pool_address: str
    from_token: str
    to_token: str
    share: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "poolAddress": self.pool_address,
            "fromToken": self.from_token,
            "toToken": self.to_token,
            "share": int(self.share),
        }


@dataclass(frozen=True)
class SwapTransaction:
    to: str
    data: str
    value: str = "0"
    gas_limit: str = "0"

    def to_dict(self) -> Dict[str, Any]:
        return {"to": self.to, "data": self.data, "value": self.value, "gasLimit": self.gas_limit}


@dataclass(frozen=True)
class PlatformFeeInfo:
    fee_bps: int
    fee_percent: float
    fee_amount: str
    recipient: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feeBps": int(self.fee_bps),
            "feePercent": self.fee_percent,
            "feeAmount": self.fee_amount,
            "recipient": self.recipient,
        }


@dataclass(frozen=True)
class QuoteResult:
    aggregator: str
    from_token: Token
    to_token: Token
    from_amount: str
    to_amount: str
    estimated_gas: str
    price_impact: float
    route: List[RouteStep] = field(default_factory=list)
    protocols: List[str] = field(default_factory=list)
    fee: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "aggregator": self.aggregator,
            "fromToken": self.from_token.to_dict(),
            "toToken": self.to_token.to_dict(),
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "estimatedGas": self.estimated_gas,
            "priceImpact": self.price_impact,
            "route": [step.to_dict() for step in self.route],
            "protocols": list(self.protocols),
        }
        if self.fee is not None:
            out["fee"] = self.fee
        return out


@dataclass(frozen=True)
class BestQuote:
    best: QuoteResult
    savings: str
    savings_percent: float
    all_quotes: List[QuoteResult]
    platform_fee: Optional[PlatformFeeInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        out = self.best.to_dict()
        out["savings"] = self.savings
        out["savingsPercent"] = self.savings_percent
        out["allQuotes"] = [q.to_dict() for q in self.all_quotes]
        if self.platform_fee is not None:
            out["platformFee"] = self.platform_fee.to_dict()
        return out


@dataclass(frozen=True)
class CrossChainQuoteResult:
    aggregator: str
    from_chain_id: int
    to_chain_id: int
    from_token: Token
    to_token: Token
    from_amount: str
    to_amount: str
    bridge_used: str
    estimated_time_seconds: int
    estimated_gas: str
    fees_usd: str
    transaction: SwapTransaction
    recipient: str
    dex_used: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "aggregator": self.aggregator,
            "fromChainId": int(self.from_chain_id),
            "toChainId": int(self.to_chain_id),
            "fromToken": self.from_token.to_dict(),
            "toToken": self.to_token.to_dict(),
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "bridgeUsed": self.bridge_used,
            "estimatedTimeSeconds": int(self.estimated_time_seconds),
            "estimatedGas": self.estimated_gas,
            "feesUsd": self.fees_usd,
            "transaction": self.transaction.to_dict(),
            "toAddress": self.recipient,
        }
        if self.dex_used:
            out["dexUsed"] = self.dex_used
        return out


@dataclass(frozen=True)
class BestCrossChainQuote:
    best: CrossChainQuoteResult
    savings: str
    savings_percent: float
    all_quotes: List[CrossChainQuoteResult]

    def to_dict(self) -> Dict[str, Any]:
        out = self.best.to_dict()
        out["savings"] = self.savings
        out["savingsPercent"] = self.savings_percent
        out["allQuotes"] = [q.to_dict() for q in self.all_quotes]
        return out


@dataclass(frozen=True)
class FlashLoanResult:
    provider: str
    asset: str
    amount: str
    fee: str
    fee_percent: float
    transaction: SwapTransaction
    available: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "asset": self.asset,
            "amount": self.amount,
            "fee": self.fee,
            "feePercent": self.fee_percent,
            "transaction": self.transaction.to_dict(),
            "available": bool(self.available),
        }


@dataclass(frozen=True)
class BestFlashLoan:
    best: FlashLoanResult
    all: List[FlashLoanResult]
    platform_fee: Optional[PlatformFeeInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "best": self.best.to_dict(),
            "all": [r.to_dict() for r in self.all],
        }
        if self.platform_fee is not None:
            out["platformFee"] = self.platform_fee.to_dict()
        return out

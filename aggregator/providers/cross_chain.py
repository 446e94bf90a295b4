from __future__ import annotations

from typing import Dict, Optional

from aggregator import config
from aggregator.amounts import apply_spread, bps_of, format_units, parse_amount
from aggregator.providers.base import CrossChainProvider, chain_set
from aggregator.tokens import make_token
from aggregator.types import CrossChainQuoteRequest, CrossChainQuoteResult, SwapTransaction


def placeholder_transaction(router: str, gas_limit: int = config.BRIDGE_TX_GAS_LIMIT) -> SwapTransaction:
    # Calldata comes from the aggregator's build-tx endpoint; none is produced here.
    return SwapTransaction(to=router, data="0x", value="0", gas_limit=str(int(gas_limit)))


class BridgeAdapter(CrossChainProvider):
    """Simulated cross-chain aggregator.

    Output is the input minus `fee_bps`. The router table is also the set of
    source chains the aggregator can start from.
    """

    def __init__(
        self,
        name: str,
        *,
        fee_bps: int,
        bridge: str,
        dex: Optional[str],
        eta_s: int,
        gas_estimate: int,
        routers: Dict[int, str],
        fee_display_bps: int = 0,
    ):
        self.name = str(name)
        self.fee_bps = int(fee_bps)
        self.bridge = str(bridge)
        self.dex = dex
        self.eta_s = int(eta_s)
        self.gas_estimate = int(gas_estimate)
        self.routers = dict(routers)
        self.fee_display_bps = int(fee_display_bps)
        self.supported_chains = chain_set(self.routers.keys())

    def router_for(self, chain_id: int) -> str:
        return self.routers.get(int(chain_id), config.ZERO_ADDRESS)

    async def quote(self, request: CrossChainQuoteRequest) -> Optional[CrossChainQuoteResult]:
        if not self.supports_chain(request.from_chain_id):
            return None

        amount_in = parse_amount(request.amount)
        amount_out = apply_spread(amount_in, self.fee_bps)
        fees_usd = format_units(bps_of(amount_in, self.fee_display_bps), decimals=18, places=4)

        return CrossChainQuoteResult(
            aggregator=self.name,
            from_chain_id=int(request.from_chain_id),
            to_chain_id=int(request.to_chain_id),
            from_token=make_token(request.from_token, request.from_chain_id),
            to_token=make_token(request.to_token, request.to_chain_id),
            from_amount=request.amount,
            to_amount=str(amount_out),
            bridge_used=self.bridge,
            dex_used=self.dex,
            estimated_time_seconds=self.eta_s,
            estimated_gas=str(self.gas_estimate),
            fees_usd=fees_usd,
            transaction=placeholder_transaction(self.router_for(request.from_chain_id)),
            recipient=request.recipient,
        )

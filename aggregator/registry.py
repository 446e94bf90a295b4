from __future__ import annotations

from typing import Dict, Iterable, List, Optional, TypeVar

from aggregator import config
from aggregator.errors import NoProvidersForChain
from aggregator.providers.base import CrossChainProvider, FlashLoanProvider, QuoteProvider, SwapProvider
from aggregator.providers.cross_chain import BridgeAdapter
from aggregator.providers.flashloan import FlashLoanPool
from aggregator.providers.swap import FixedSpreadAdapter, UniswapRoutingAdapter

P = TypeVar("P", bound=QuoteProvider)


def _clean_names(names: Optional[Iterable[str]]) -> Optional[List[str]]:
    if names is None:
        return None
    out: List[str] = []
    for n in names:
        name = str(n).strip()
        if name:
            out.append(name)
    return out


def build_swap_providers() -> Dict[str, SwapProvider]:
    """Swap aggregators in registration order (this order breaks ranking ties)."""
    providers: List[SwapProvider] = [
        FixedSpreadAdapter(
            "1inch",
            spread_bps=config.ONEINCH_SPREAD_BPS,
            gas_estimate=150_000,
            liquidity=config.ONEINCH_LIQUIDITY,
            protocols=["Uniswap V3", "Curve", "Balancer"],
            route=[
                ("Uniswap V3", "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640", 60),
                ("Curve", "0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7", 40),
            ],
        ),
        FixedSpreadAdapter(
            "0x Protocol",
            spread_bps=config.ZEROX_SPREAD_BPS,
            gas_estimate=180_000,
            liquidity=config.ZEROX_LIQUIDITY,
            protocols=["Uniswap V2", "SushiSwap"],
            route=[
                ("Uniswap V2", "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc", 70),
                ("SushiSwap", "0x397FF1542f962076d0BFE58eA045FfA2d347ACa0", 30),
            ],
            protocol_fee=0.05,
        ),
        FixedSpreadAdapter(
            "Paraswap",
            spread_bps=config.PARASWAP_SPREAD_BPS,
            gas_estimate=160_000,
            liquidity=config.PARASWAP_LIQUIDITY,
            protocols=["Uniswap V3", "Aave"],
            route=[("Uniswap V3", "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640", 100)],
        ),
        UniswapRoutingAdapter("Uniswap"),
    ]
    return {p.name: p for p in providers}


def build_cross_chain_providers() -> Dict[str, CrossChainProvider]:
    providers: List[CrossChainProvider] = [
        BridgeAdapter(
            "Li.Fi",
            fee_bps=config.LIFI_FEE_BPS,
            bridge="Stargate",
            dex="Uniswap V3",
            eta_s=120,
            gas_estimate=250_000,
            routers=config.LIFI_ROUTER_ADDRESSES,
        ),
        BridgeAdapter(
            "Socket",
            fee_bps=config.SOCKET_FEE_BPS,
            bridge="Hop Protocol",
            dex="SushiSwap",
            eta_s=180,
            gas_estimate=280_000,
            routers=config.SOCKET_GATEWAY_ADDRESSES,
            fee_display_bps=config.SOCKET_FEE_DISPLAY_BPS,
        ),
        BridgeAdapter(
            "Squid",
            fee_bps=config.SQUID_FEE_BPS,
            bridge="Axelar",
            dex="Uniswap V3",
            eta_s=60,
            gas_estimate=220_000,
            routers=config.SQUID_ROUTER_ADDRESSES,
            fee_display_bps=config.SQUID_FEE_DISPLAY_BPS,
        ),
    ]
    return {p.name: p for p in providers}


def build_flash_loan_providers() -> Dict[str, FlashLoanProvider]:
    providers: List[FlashLoanProvider] = [
        FlashLoanPool(
            "Aave V3",
            fee_bps=config.AAVE_V3_FEE_BPS,
            chains=config.AAVE_V3_CHAINS,
            max_liquidity=config.AAVE_V3_MAX_LIQUIDITY,
            calldata="aave_v3",
        ),
        FlashLoanPool(
            "dYdX",
            fee_bps=config.DYDX_FEE_BPS,
            chains=config.DYDX_CHAINS,
            max_liquidity=config.DYDX_MAX_LIQUIDITY,
            calldata="dydx",
        ),
        FlashLoanPool(
            "Uniswap V3",
            fee_bps=config.UNISWAP_V3_FLASH_FEE_BPS,
            chains=config.UNISWAP_V3_FLASH_CHAINS,
            max_liquidity=config.UNISWAP_V3_FLASH_MAX_LIQUIDITY,
            calldata="uniswap_v3",
        ),
        FlashLoanPool(
            "Balancer",
            fee_bps=config.BALANCER_FEE_BPS,
            chains=config.BALANCER_CHAINS,
            max_liquidity=config.BALANCER_MAX_LIQUIDITY,
            calldata="balancer",
        ),
    ]
    return {p.name: p for p in providers}


def select_providers(
    registry: Dict[str, P],
    *,
    chain_id: int,
    allowed: Optional[Iterable[str]] = None,
    kind: str = "quote",
    filter_chain: bool = True,
) -> List[P]:
    """Narrow a registry for one request, keeping registration order.

    `allowed` intersects by name; its own ordering is ignored. An empty
    selection is a precondition failure raised before any provider runs.
    """
    names = _clean_names(allowed)
    wanted = set(names) if names is not None else None

    out: List[P] = []
    for name, provider in registry.items():
        if wanted is not None and name not in wanted:
            continue
        if filter_chain and not provider.supports_chain(chain_id):
            continue
        out.append(provider)

    if not out:
        raise NoProvidersForChain(chain_id, kind=kind)
    return out

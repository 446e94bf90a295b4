# aggregator/config.py
# Static provider tables plus a few env-driven knobs.
# Everything in here is read-only at request time.

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_TOKEN = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# Chains served by the single-chain swap path.
SUPPORTED_CHAINS = [1, 10, 56, 137, 8453, 42161, 43114]

# Chains served by at least one cross-chain aggregator.
CROSS_CHAIN_SUPPORTED_CHAINS = [
    1,      # Ethereum
    10,     # Optimism
    56,     # BNB Chain
    137,    # Polygon
    250,    # Fantom
    8453,   # Base
    42161,  # Arbitrum One
    43114,  # Avalanche
]

# Known tokens per chain: address -> (symbol, name, decimals).
KNOWN_TOKENS: Dict[int, Dict[str, tuple]] = {
    1: {
        NATIVE_TOKEN: ("ETH", "Ethereum", 18),
        "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2": ("WETH", "Wrapped Ether", 18),
        "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48": ("USDC", "USD Coin", 6),
        "0xdAC17F958D2ee523a2206206994597C13D831ec7": ("USDT", "Tether USD", 6),
        "0x6B175474E89094C44Da98b954EedeAC495271d0F": ("DAI", "Dai Stablecoin", 18),
        "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599": ("WBTC", "Wrapped BTC", 8),
    },
}

# Symbol shortcuts accepted wherever an address is expected (mainnet).
TOKENS = {sym: addr for addr, (sym, _name, _dec) in KNOWN_TOKENS[1].items()}

# ---------------------------------------------------------------------------
# Swap aggregators (simulated). Spread is the proportional deduction in bps.
# ---------------------------------------------------------------------------

ONEINCH_SPREAD_BPS = 30       # 0.30%
ZEROX_SPREAD_BPS = 50         # 0.50%
PARASWAP_SPREAD_BPS = 20      # 0.20%

# Liquidity depth (whole tokens) used for the price impact estimate.
ONEINCH_LIQUIDITY = 10_000_000
ZEROX_LIQUIDITY = 8_000_000
PARASWAP_LIQUIDITY = 12_000_000

# Uniswap routing API. Unset -> the adapter declines every request.
UNISWAP_QUOTE_API_URL: Optional[str] = None
UNISWAP_API_KEY: Optional[str] = None

# Outbound HTTP (used by adapters that perform network I/O).
QUOTE_HTTP_TIMEOUT_S = 8.0
QUOTE_RETRY_ATTEMPTS = 3
QUOTE_RETRY_BASE_DELAY_S = 0.2

# ---------------------------------------------------------------------------
# Cross-chain aggregators (simulated). Router tables double as the set of
# source chains each aggregator supports.
# ---------------------------------------------------------------------------

LIFI_FEE_BPS = 60     # output ~ 99.4% of input
SOCKET_FEE_BPS = 80   # ~ 99.2%
SQUID_FEE_BPS = 50    # ~ 99.5%

# Fee display in USD, as bps of the input (18-decimals assumed).
SOCKET_FEE_DISPLAY_BPS = 40   # 0.4%
SQUID_FEE_DISPLAY_BPS = 20    # 0.2%

LIFI_ROUTER_ADDRESSES: Dict[int, str] = {
    1: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    10: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    56: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    137: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    250: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    8453: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    42161: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
    43114: "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE",
}

SOCKET_GATEWAY_ADDRESSES: Dict[int, str] = {
    1: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    10: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    56: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    137: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    8453: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    42161: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
    43114: "0x3a23F943181408EAC424116Af7b7790c94Cb97a5",
}

SQUID_ROUTER_ADDRESSES: Dict[int, str] = {
    1: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
    10: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
    137: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
    8453: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
    42161: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
    43114: "0xce16F69375520ab01377ce7B88f5BA8C48F8D666",
}

BRIDGE_TX_GAS_LIMIT = 500_000

# ---------------------------------------------------------------------------
# Flash-loan providers. Ceilings are base units per asset address; an asset
# missing from a provider's table means "no liquidity there".
# ---------------------------------------------------------------------------

_USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
_USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
_DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
_WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"

AAVE_V3_FEE_BPS = 5
DYDX_FEE_BPS = 0
UNISWAP_V3_FLASH_FEE_BPS = 5
BALANCER_FEE_BPS = 0

AAVE_V3_CHAINS = [1, 10, 137, 42161, 43114, 8453]
DYDX_CHAINS = [1]
UNISWAP_V3_FLASH_CHAINS = [1, 10, 137, 42161, 8453]
BALANCER_CHAINS = [1, 137, 42161]

AAVE_V3_MAX_LIQUIDITY = {
    _USDC: "500000000000000",
    _USDT: "300000000000000",
    _DAI: "200000000000000",
    _WETH: "100000000000000000000000",
}
DYDX_MAX_LIQUIDITY = {
    _USDC: "100000000000000",
    _WETH: "50000000000000000000000",
}
UNISWAP_V3_FLASH_MAX_LIQUIDITY: Dict[str, str] = {}
BALANCER_MAX_LIQUIDITY = {
    _USDC: "80000000000000",
    _DAI: "50000000000000",
}

# chain id -> provider name -> pool / vault contract
FLASH_LOAN_CONTRACT_ADDRESSES: Dict[int, Dict[str, str]] = {
    1: {
        "Aave V3": "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
        "dYdX": "0x1E0447b19BB6EcFdAe1e4AE1694b0C3659614e4e",
        "Uniswap V3": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
        "Balancer": "0xBA12222222228d8Ba445958a75a0704d566BF2C8",
    },
    10: {
        "Aave V3": "0x794a61358D6845594F94dc1DB02A252b5b4814aD",
        "Uniswap V3": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
    },
    137: {
        "Aave V3": "0x794a61358D6845594F94dc1DB02A252b5b4814aD",
        "Uniswap V3": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
        "Balancer": "0xBA12222222228d8Ba445958a75a0704d566BF2C8",
    },
    42161: {
        "Aave V3": "0x794a61358D6845594F94dc1DB02A252b5b4814aD",
        "Uniswap V3": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
        "Balancer": "0xBA12222222228d8Ba445958a75a0704d566BF2C8",
    },
    43114: {
        "Aave V3": "0x794a61358D6845594F94dc1DB02A252b5b4814aD",
    },
    8453: {
        "Aave V3": "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5",
        "Uniswap V3": "0x2626664c2603336E57B271c5C0b26F421741e481",
    },
}

FLASH_LOAN_GAS_LIMIT = 300_000

# ---------------------------------------------------------------------------
# Platform fee (basis points, 1 bp = 0.01%). Env PLATFORM_FEE_BPS overrides.
# ---------------------------------------------------------------------------

DEFAULT_PLATFORM_FEE_BPS = 10
MAX_FEE_BPS = 10_000

_DIGITS = re.compile(r"[0-9]+")


def _env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _parse_fee_bps(raw: Optional[str]) -> tuple:
    """Return (bps, out_of_range) for a raw PLATFORM_FEE_BPS value."""
    if not raw:
        return DEFAULT_PLATFORM_FEE_BPS, False
    if not _DIGITS.fullmatch(raw):
        return DEFAULT_PLATFORM_FEE_BPS, True
    value = int(raw)
    if value > MAX_FEE_BPS:
        return DEFAULT_PLATFORM_FEE_BPS, True
    return value, False


def platform_fee_bps() -> int:
    bps, _bad = _parse_fee_bps(_env("PLATFORM_FEE_BPS"))
    return int(bps)


def platform_fee_recipient() -> Optional[str]:
    return _env("PLATFORM_FEE_RECIPIENT")


def uniswap_quote_api_url() -> Optional[str]:
    return _env("UNISWAP_QUOTE_API_URL") or UNISWAP_QUOTE_API_URL


def uniswap_api_key() -> Optional[str]:
    return _env("UNISWAP_API_KEY") or UNISWAP_API_KEY


def _float_env(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return float(default)
    try:
        return float(raw)
    except ValueError:
        return float(default)


def _int_env(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def http_timeout_s() -> float:
    return _float_env("QUOTE_HTTP_TIMEOUT_S", QUOTE_HTTP_TIMEOUT_S)


def retry_attempts() -> int:
    return max(1, _int_env("QUOTE_RETRY_ATTEMPTS", QUOTE_RETRY_ATTEMPTS))


def retry_base_delay_s() -> float:
    return max(0.0, _float_env("QUOTE_RETRY_BASE_DELAY_S", QUOTE_RETRY_BASE_DELAY_S))


@dataclass(frozen=True)
class ConfigWarning:
    key: str
    message: str


def validate_config() -> List[ConfigWarning]:
    """Non-fatal configuration issues, for logging at startup."""
    warnings: List[ConfigWarning] = []

    raw_bps = _env("PLATFORM_FEE_BPS")
    _bps, bad = _parse_fee_bps(raw_bps)
    if bad:
        warnings.append(
            ConfigWarning(
                "PLATFORM_FEE_BPS",
                f'Invalid value "{raw_bps}": must be an integer 0-10000; '
                f"the default of {DEFAULT_PLATFORM_FEE_BPS} bps is being used.",
            )
        )

    if not platform_fee_recipient():
        warnings.append(
            ConfigWarning(
                "PLATFORM_FEE_RECIPIENT",
                "Not set: platform fees are calculated but no recipient is configured.",
            )
        )

    if not uniswap_quote_api_url():
        warnings.append(
            ConfigWarning(
                "UNISWAP_QUOTE_API_URL",
                "Not set: Uniswap quotes will be skipped.",
            )
        )

    return warnings


def token_address(token: str) -> str:
    """Return canonical address if token is a known symbol, else return input."""
    t = str(token).strip()
    if not t:
        return t
    return TOKENS.get(t.upper(), t)

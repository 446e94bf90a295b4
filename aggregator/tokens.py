from __future__ import annotations

from typing import Dict, Optional, Tuple

from aggregator import config
from aggregator.types import Token

UNKNOWN_SYMBOL = "UNKNOWN"
UNKNOWN_NAME = "Unknown Token"
DEFAULT_DECIMALS = 18

# chain id -> lower-case address -> (symbol, name, decimals)
_BY_ADDR: Dict[int, Dict[str, Tuple[str, str, int]]] = {
    int(chain_id): {str(addr).lower(): meta for addr, meta in table.items()}
    for chain_id, table in config.KNOWN_TOKENS.items()
}


def lookup(address: str, chain_id: int) -> Optional[Tuple[str, str, int]]:
    table = _BY_ADDR.get(int(chain_id))
    if not table:
        return None
    return table.get(config.token_address(address).lower())


def make_token(address: str, chain_id: int) -> Token:
    """Token for `address` on `chain_id`, falling back to an UNKNOWN 18-decimals token."""
    addr = config.token_address(address)
    meta = lookup(addr, chain_id)
    if meta is None:
        return Token(
            address=addr,
            chain_id=int(chain_id),
            symbol=UNKNOWN_SYMBOL,
            name=UNKNOWN_NAME,
            decimals=DEFAULT_DECIMALS,
        )
    symbol, name, decimals = meta
    return Token(address=addr, chain_id=int(chain_id), symbol=symbol, name=name, decimals=int(decimals))
"""Request parsing for the wire boundary (camel-case dicts -> request dataclasses)."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from eth_utils import is_hex_address

from aggregator.amounts import is_integer_string
from aggregator.config import token_address
from aggregator.errors import InvalidRequest
from aggregator.types import CrossChainQuoteRequest, FlashLoanRequest, QuoteRequest

MAX_SLIPPAGE_PERCENT = 50.0

_HEX = re.compile(r"^0x[0-9a-fA-F]*$")


def is_address(value: object) -> bool:
    """0x + 40 hex chars. Checksum casing is not enforced."""
    return isinstance(value, str) and is_hex_address(value)


def _present(data: Dict[str, Any], key: str) -> bool:
    v = data.get(key)
    if v is None:
        return False
    if isinstance(v, str):
        return bool(v.strip())
    return True


def _require(data: Dict[str, Any], keys: List[str], label: str = "fields") -> None:
    if not all(_present(data, k) for k in keys):
        raise InvalidRequest(f"Missing required {label}: {', '.join(keys)}")


def _chain_id(raw: Any, name: str = "chainId") -> int:
    if isinstance(raw, bool):
        raise InvalidRequest(f"Invalid {name}")
    if isinstance(raw, int):
        return raw
    s = str(raw).strip()
    if not is_integer_string(s):
        raise InvalidRequest(f"Invalid {name}")
    return int(s)


def _amount(raw: Any) -> str:
    s = raw if isinstance(raw, str) else str(raw)
    if isinstance(raw, bool) or not is_integer_string(s):
        raise InvalidRequest("amount must be a non-negative integer string")
    return s


def _slippage(raw: Any) -> Optional[float]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidRequest("slippage must be a number between 0 and 50") from None
    if value != value or value < 0 or value > MAX_SLIPPAGE_PERCENT:
        raise InvalidRequest("slippage must be a number between 0 and 50")
    return value


def _providers(raw: Any) -> Optional[List[str]]:
    if raw is None:
        return None
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    names = [str(x).strip() for x in items if str(x).strip()]
    return names or None


def parse_quote_request(data: Dict[str, Any]) -> QuoteRequest:
    _require(data, ["fromToken", "toToken", "amount", "chainId"])
    return QuoteRequest(
        from_token=token_address(str(data["fromToken"])),
        to_token=token_address(str(data["toToken"])),
        amount=_amount(data["amount"]),
        chain_id=_chain_id(data["chainId"]),
        slippage_percent=_slippage(data.get("slippage")),
        allowed_providers=_providers(data.get("aggregators")),
    )


def parse_cross_chain_request(data: Dict[str, Any]) -> CrossChainQuoteRequest:
    _require(data, ["fromChainId", "toChainId", "fromToken", "toToken", "amount", "fromAddress"])
    from_address = str(data["fromAddress"]).strip()
    if not is_address(from_address):
        raise InvalidRequest("fromAddress must be a valid Ethereum address")
    to_address = data.get("toAddress") or None
    if to_address is not None and not is_address(str(to_address)):
        raise InvalidRequest("toAddress must be a valid Ethereum address")
    return CrossChainQuoteRequest(
        from_chain_id=_chain_id(data["fromChainId"], "fromChainId"),
        to_chain_id=_chain_id(data["toChainId"], "toChainId"),
        from_token=token_address(str(data["fromToken"])),
        to_token=token_address(str(data["toToken"])),
        amount=_amount(data["amount"]),
        from_address=from_address,
        to_address=str(to_address) if to_address is not None else None,
        slippage_percent=_slippage(data.get("slippage")),
        allowed_providers=_providers(data.get("aggregators")),
    )


def parse_flash_loan_request(data: Dict[str, Any]) -> FlashLoanRequest:
    _require(data, ["asset", "amount", "chainId", "targetContract"])
    chain_id = _chain_id(data["chainId"])
    amount = _amount(data["amount"])
    asset = str(data["asset"]).strip()
    if not is_address(asset):
        raise InvalidRequest("asset must be a valid Ethereum address")
    target = str(data["targetContract"]).strip()
    if not is_address(target):
        raise InvalidRequest("targetContract must be a valid Ethereum address")
    params = data.get("params") or "0x"
    if not isinstance(params, str) or not _HEX.match(params) or len(params) % 2:
        raise InvalidRequest("params must be 0x-prefixed hex bytes")
    provider = data.get("provider")
    return FlashLoanRequest(
        asset=asset,
        amount=amount,
        chain_id=chain_id,
        target_contract=target,
        params=params,
        provider=(str(provider).strip() or None) if provider else None,
    )

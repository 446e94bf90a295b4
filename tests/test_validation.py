from __future__ import annotations

import pytest

from aggregator.errors import InvalidRequest
from aggregator.validation import (
    is_address,
    parse_cross_chain_request,
    parse_flash_loan_request,
    parse_quote_request,
)

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
ADDR = "0x1111111111111111111111111111111111111111"


def test_quote_request_from_wire() -> None:
    req = parse_quote_request(
        {"fromToken": "WETH", "toToken": USDC, "amount": "1000", "chainId": "1", "slippage": "0.5", "aggregators": "1inch, Paraswap,"}
    )
    assert req.from_token == "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
    assert req.chain_id == 1
    assert req.slippage_percent == pytest.approx(0.5)
    assert req.allowed_providers == ["1inch", "Paraswap"]


def test_quote_request_missing_fields() -> None:
    with pytest.raises(InvalidRequest) as exc:
        parse_quote_request({"fromToken": "WETH", "amount": "1"})
    assert str(exc.value) == "Missing required fields: fromToken, toToken, amount, chainId"


@pytest.mark.parametrize("amount", ["1.5", "-1", "1e18", "0x10", "1\n"])
def test_amount_contract(amount: str) -> None:
    with pytest.raises(InvalidRequest) as exc:
        parse_quote_request({"fromToken": "WETH", "toToken": USDC, "amount": amount, "chainId": 1})
    assert "non-negative integer string" in str(exc.value)


def test_slippage_bounds() -> None:
    base = {"fromToken": "WETH", "toToken": USDC, "amount": "1", "chainId": 1}
    assert parse_quote_request({**base, "slippage": 50}).slippage_percent == 50.0
    for bad in [-0.1, 50.1, "nan", "x"]:
        with pytest.raises(InvalidRequest):
            parse_quote_request({**base, "slippage": bad})


def test_bad_chain_id() -> None:
    with pytest.raises(InvalidRequest) as exc:
        parse_quote_request({"fromToken": "WETH", "toToken": USDC, "amount": "1", "chainId": "mainnet"})
    assert str(exc.value) == "Invalid chainId"


def test_cross_chain_request() -> None:
    req = parse_cross_chain_request(
        {"fromChainId": 1, "toChainId": "137", "fromToken": USDC, "toToken": USDC, "amount": "5", "fromAddress": ADDR}
    )
    assert (req.from_chain_id, req.to_chain_id) == (1, 137)
    assert req.recipient == ADDR
    with pytest.raises(InvalidRequest) as exc:
        parse_cross_chain_request(
            {"fromChainId": "x", "toChainId": 137, "fromToken": USDC, "toToken": USDC, "amount": "5", "fromAddress": ADDR}
        )
    assert str(exc.value) == "Invalid fromChainId"


def test_flash_loan_request() -> None:
    req = parse_flash_loan_request(
        {"asset": USDC, "amount": "100", "chainId": 1, "targetContract": ADDR, "params": "0xdeadbeef", "provider": "Aave V3"}
    )
    assert req.params == "0xdeadbeef"
    assert req.provider == "Aave V3"
    assert parse_flash_loan_request({"asset": USDC, "amount": "1", "chainId": 1, "targetContract": ADDR}).params == "0x"


def test_flash_loan_request_rejects_bad_addresses_and_params() -> None:
    base = {"asset": USDC, "amount": "1", "chainId": 1, "targetContract": ADDR}
    with pytest.raises(InvalidRequest, match="asset must be a valid Ethereum address"):
        parse_flash_loan_request({**base, "asset": "0x1234"})
    with pytest.raises(InvalidRequest, match="targetContract"):
        parse_flash_loan_request({**base, "targetContract": "nope"})
    with pytest.raises(InvalidRequest, match="params"):
        parse_flash_loan_request({**base, "params": "0xabc"})


def test_is_address() -> None:
    assert is_address(USDC)
    assert is_address(USDC.lower())
    assert not is_address("0x123")
    assert not is_address(None)

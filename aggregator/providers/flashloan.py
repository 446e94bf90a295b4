from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from aggregator import config
from aggregator.amounts import bps_of, parse_amount
from aggregator.providers.base import FlashLoanProvider, chain_set
from aggregator.types import FlashLoanRequest, FlashLoanResult, SwapTransaction


def _call(sig: str, types: List[str], args: List[object]) -> str:
    return "0x" + (bytes(function_signature_to_4byte_selector(sig)) + abi_encode(types, args)).hex()


def _hex_bytes(raw: Optional[str]) -> bytes:
    hx = str(raw or "0x")
    hx = hx[2:] if hx.startswith("0x") else hx
    return bytes.fromhex(hx)


def _aave_v3(request: FlashLoanRequest, amount: int) -> str:
    target = to_checksum_address(request.target_contract)
    return _call(
        "flashLoan(address,address[],uint256[],uint256[],address,bytes,uint16)",
        ["address", "address[]", "uint256[]", "uint256[]", "address", "bytes", "uint16"],
        [target, [to_checksum_address(request.asset)], [amount], [0], target, _hex_bytes(request.params), 0],
    )


def _uniswap_v3(request: FlashLoanRequest, amount: int) -> str:
    return _call(
        "flash(address,uint256,uint256,bytes)",
        ["address", "uint256", "uint256", "bytes"],
        [to_checksum_address(request.target_contract), amount, 0, _hex_bytes(request.params)],
    )


def _balancer(request: FlashLoanRequest, amount: int) -> str:
    return _call(
        "flashLoan(address,address[],uint256[],bytes)",
        ["address", "address[]", "uint256[]", "bytes"],
        [
            to_checksum_address(request.target_contract),
            [to_checksum_address(request.asset)],
            [amount],
            _hex_bytes(request.params),
        ],
    )


def _empty(request: FlashLoanRequest, amount: int) -> str:
    # SoloMargin operate() needs market ids per asset; left to the caller.
    return "0x"


CALLDATA_BUILDERS = {
    "aave_v3": _aave_v3,
    "uniswap_v3": _uniswap_v3,
    "balancer": _balancer,
    "dydx": _empty,
}


class FlashLoanPool(FlashLoanProvider):
    """Fee schedule + per-asset liquidity ceilings for one flash-loan source."""

    def __init__(
        self,
        name: str,
        *,
        fee_bps: int,
        chains: Iterable[int],
        max_liquidity: Dict[str, str],
        calldata: str,
        contracts: Optional[Dict[int, Dict[str, str]]] = None,
        gas_limit: int = config.FLASH_LOAN_GAS_LIMIT,
    ):
        self.name = str(name)
        self.fee_bps = int(fee_bps)
        self.supported_chains = chain_set(chains)
        self.max_liquidity = {str(addr).lower(): int(v) for addr, v in max_liquidity.items()}
        self._build_calldata = CALLDATA_BUILDERS[calldata]
        self.contracts = contracts if contracts is not None else config.FLASH_LOAN_CONTRACT_ADDRESSES
        self.gas_limit = int(gas_limit)

    def ceiling(self, asset: str) -> Optional[int]:
        return self.max_liquidity.get(str(asset).lower())

    def contract_for(self, chain_id: int) -> str:
        return self.contracts.get(int(chain_id), {}).get(self.name, config.ZERO_ADDRESS)

    async def quote(self, request: FlashLoanRequest) -> Optional[FlashLoanResult]:
        if not self.supports_chain(request.chain_id):
            return None

        amount = parse_amount(request.amount)
        cap = self.ceiling(request.asset)
        available = cap is not None and amount <= cap

        return FlashLoanResult(
            provider=self.name,
            asset=request.asset,
            amount=request.amount,
            fee=str(bps_of(amount, self.fee_bps)),
            fee_percent=self.fee_bps / 100,
            transaction=SwapTransaction(
                to=self.contract_for(request.chain_id),
                data=self._build_calldata(request, amount),
                value="0",
                gas_limit=str(self.gas_limit),
            ),
            available=available,
        )

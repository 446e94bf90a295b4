from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import aiohttp

from aggregator import config
from aggregator.amounts import apply_spread, is_integer_string, parse_amount, price_impact_percent
from aggregator.providers.base import SwapProvider, chain_set
from aggregator.tokens import make_token
from aggregator.types import QuoteRequest, QuoteResult, RouteStep
from infra.retry import TRANSPORT_ERRORS, RetryOptions, fetch_with_retry

logger = logging.getLogger(__name__)

# (protocol, pool address, share percent)
RouteTemplate = Sequence[Tuple[str, str, int]]


def _same_token(a: str, b: str) -> bool:
    return config.token_address(a).lower() == config.token_address(b).lower()


def _route(template: RouteTemplate, request: QuoteRequest) -> List[RouteStep]:
    return [
        RouteStep(
            protocol=protocol,
            pool_address=pool,
            from_token=request.from_token,
            to_token=request.to_token,
            share=int(share),
        )
        for protocol, pool, share in template
    ]


class FixedSpreadAdapter(SwapProvider):
    """Simulated aggregator: output = input minus a fixed bps deduction."""

    def __init__(
        self,
        name: str,
        *,
        spread_bps: int,
        gas_estimate: int,
        liquidity: int,
        protocols: Iterable[str],
        route: RouteTemplate,
        chains: Iterable[int] = config.SUPPORTED_CHAINS,
        protocol_fee: Optional[float] = None,
    ):
        self.name = str(name)
        self.spread_bps = int(spread_bps)
        self.gas_estimate = int(gas_estimate)
        self.liquidity = int(liquidity)
        self.protocols = [str(p) for p in protocols]
        self.route = list(route)
        self.supported_chains = chain_set(chains)
        self.protocol_fee = protocol_fee

    async def quote(self, request: QuoteRequest) -> Optional[QuoteResult]:
        if not self.supports_chain(request.chain_id):
            return None
        if _same_token(request.from_token, request.to_token):
            return None

        amount_in = parse_amount(request.amount)
        amount_out = apply_spread(amount_in, self.spread_bps)

        return QuoteResult(
            aggregator=self.name,
            from_token=make_token(request.from_token, request.chain_id),
            to_token=make_token(request.to_token, request.chain_id),
            from_amount=request.amount,
            to_amount=str(amount_out),
            estimated_gas=str(self.gas_estimate),
            price_impact=price_impact_percent(amount_in, self.liquidity),
            route=_route(self.route, request),
            protocols=list(self.protocols),
            fee=self.protocol_fee,
        )


@dataclass(frozen=True)
class HttpReply:
    status: int
    body: Any = None


class UniswapRoutingAdapter(SwapProvider):
    """Quotes from a Uniswap-style routing API over HTTP.

    Expects a JSON body with `quote` (output base units, as a string) and
    optionally `gasUseEstimate`. Declines when no endpoint is configured, when
    the API answers with a non-200 status, or when retries are exhausted.

    Without an injected `session`, each call opens and closes its own
    `aiohttp.ClientSession` on the running loop, so one adapter instance can
    serve callers on different event loops.
    """

    def __init__(
        self,
        name: str = "Uniswap",
        *,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        session: Optional[Any] = None,
        retry: Optional[RetryOptions] = None,
        timeout_s: Optional[float] = None,
        chains: Iterable[int] = config.SUPPORTED_CHAINS,
        gas_estimate: int = 150_000,
    ):
        self.name = str(name)
        self.url = url
        self.api_key = api_key
        self.retry = retry
        self.timeout_s = timeout_s
        self.supported_chains = chain_set(chains)
        self.gas_estimate = int(gas_estimate)
        self._session = session

    def _endpoint(self) -> Optional[str]:
        return self.url or config.uniswap_quote_api_url()

    def _retry_options(self) -> RetryOptions:
        if self.retry is not None:
            return self.retry
        return RetryOptions(attempts=config.retry_attempts(), base_delay_s=config.retry_base_delay_s())

    async def _fetch(self, session: Any, url: str, params: Dict[str, str], headers: Dict[str, str]) -> Optional[HttpReply]:
        to_s = float(self.timeout_s) if self.timeout_s is not None else config.http_timeout_s()

        async def _do() -> HttpReply:
            async def _read() -> HttpReply:
                async with session.get(url, params=params, headers=headers) as resp:
                    if resp.status != 200:
                        return HttpReply(status=int(resp.status))
                    return HttpReply(status=int(resp.status), body=await resp.json(content_type=None))

            return await asyncio.wait_for(_read(), timeout=to_s)

        try:
            return await fetch_with_retry(_do, self._retry_options())
        except TRANSPORT_ERRORS as e:
            logger.info("%s: giving up after retries: %s: %s", self.name, type(e).__name__, e)
            return None
        except ValueError as e:
            logger.info("%s: undecodable response: %s", self.name, e)
            return None

    async def quote(self, request: QuoteRequest) -> Optional[QuoteResult]:
        url = self._endpoint()
        if not url:
            logger.debug("%s: no endpoint configured, skipping", self.name)
            return None
        if not self.supports_chain(request.chain_id):
            return None
        if _same_token(request.from_token, request.to_token):
            return None

        amount_in = parse_amount(request.amount)
        params: Dict[str, str] = {
            "tokenInAddress": config.token_address(request.from_token),
            "tokenOutAddress": config.token_address(request.to_token),
            "tokenInChainId": str(int(request.chain_id)),
            "tokenOutChainId": str(int(request.chain_id)),
            "amount": str(amount_in),
            "type": "exactIn",
        }
        headers: Dict[str, str] = {}
        key = self.api_key or config.uniswap_api_key()
        if key:
            headers["x-api-key"] = key

        if self._session is not None:
            reply = await self._fetch(self._session, url, params, headers)
        else:
            async with aiohttp.ClientSession() as session:
                reply = await self._fetch(session, url, params, headers)
        if reply is None:
            return None

        if reply.status != 200 or not isinstance(reply.body, dict):
            logger.debug("%s: declined with http_%s", self.name, reply.status)
            return None

        raw_out = reply.body.get("quote")
        if not is_integer_string(raw_out):
            logger.debug("%s: response has no integer quote", self.name)
            return None
        raw_gas = reply.body.get("gasUseEstimate")
        gas = raw_gas if is_integer_string(raw_gas) else str(self.gas_estimate)

        return QuoteResult(
            aggregator=self.name,
            from_token=make_token(request.from_token, request.chain_id),
            to_token=make_token(request.to_token, request.chain_id),
            from_amount=request.amount,
            to_amount=str(int(raw_out)),
            estimated_gas=gas,
            price_impact=0.0,
            route=[],
            protocols=["Uniswap V3"],
        )

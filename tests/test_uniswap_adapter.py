from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from aggregator.engine import get_quotes
from aggregator.providers.swap import UniswapRoutingAdapter
from aggregator.types import QuoteRequest
from infra.retry import RetryOptions

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


class DummyResponse:
    def __init__(self, status: int, body: Optional[Dict[str, Any]] = None) -> None:
        self.status = status
        self._body = body

    async def json(self, content_type: Optional[str] = None) -> Any:
        return self._body

    async def __aenter__(self) -> "DummyResponse":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class DummySession:
    def __init__(self, replies: List[Any]) -> None:
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, str]] = None, headers: Optional[Dict[str, str]] = None) -> DummyResponse:
        self.calls.append({"url": url, "params": params, "headers": headers})
        item = self.replies.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


def _req() -> QuoteRequest:
    return QuoteRequest(from_token=WETH, to_token=USDC, amount="1000000000000000000", chain_id=1)


def _adapter(session: DummySession, **kw: Any) -> UniswapRoutingAdapter:
    return UniswapRoutingAdapter(
        url="https://quotes.example/quote",
        api_key="k",
        session=session,
        retry=RetryOptions(attempts=3, base_delay_s=0.0),
        timeout_s=5.0,
        **kw,
    )


@pytest.mark.asyncio
async def test_quote_after_transient_503() -> None:
    session = DummySession([DummyResponse(503), DummyResponse(200, {"quote": "2500000000", "gasUseEstimate": "130000"})])
    q = await _adapter(session).quote(_req())
    assert q is not None
    assert q.aggregator == "Uniswap"
    assert q.to_amount == "2500000000"
    assert q.estimated_gas == "130000"
    assert q.to_token.symbol == "USDC"
    assert len(session.calls) == 2
    call = session.calls[0]
    assert call["params"]["tokenInAddress"] == WETH
    assert call["params"]["amount"] == "1000000000000000000"
    assert call["params"]["type"] == "exactIn"
    assert call["headers"] == {"x-api-key": "k"}


@pytest.mark.asyncio
async def test_persistent_errors_decline() -> None:
    session = DummySession([DummyResponse(503)] * 3)
    assert await _adapter(session).quote(_req()) is None
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_transport_errors_decline() -> None:
    session = DummySession([aiohttp.ClientConnectionError("refused")] * 3)
    assert await _adapter(session).quote(_req()) is None
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_client_error_status_not_retried() -> None:
    session = DummySession([DummyResponse(400, {"errorCode": "VALIDATION_ERROR"})])
    assert await _adapter(session).quote(_req()) is None
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_malformed_body_declines() -> None:
    session = DummySession([DummyResponse(200, {"quote": "1.5e9"})])
    assert await _adapter(session).quote(_req()) is None


@pytest.mark.asyncio
async def test_no_endpoint_skips_network(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("UNISWAP_QUOTE_API_URL", raising=False)
    session = DummySession([])
    adapter = UniswapRoutingAdapter(session=session)
    assert await adapter.quote(_req()) is None
    assert session.calls == []


@pytest.mark.asyncio
async def test_injected_session_is_not_closed() -> None:
    session = DummySession([])
    await _adapter(session).close()
    assert session.closed is False


def test_same_adapter_quotes_on_successive_event_loops(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = UniswapRoutingAdapter(retry=RetryOptions(attempts=1, base_delay_s=0.0), timeout_s=5.0)

    async def handler(request: web.Request) -> web.Response:
        assert request.query["type"] == "exactIn"
        return web.json_response({"quote": "2500000000", "gasUseEstimate": "120000"})

    async def run_once() -> List[str]:
        app = web.Application()
        app.router.add_get("/quote", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            monkeypatch.setenv("UNISWAP_QUOTE_API_URL", str(server.make_url("/quote")))
            best = await get_quotes(_req(), registry={adapter.name: adapter})
            return [q.aggregator for q in best.all_quotes]
        finally:
            await server.close()

    assert asyncio.run(run_once()) == ["Uniswap"]
    assert asyncio.run(run_once()) == ["Uniswap"]

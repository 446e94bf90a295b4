from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List

import aiohttp
import pytest

from infra.metrics import METRICS
from infra.retry import RetryOptions, fetch_with_retry


@dataclass
class Resp:
    status: int


class Recorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def sleep(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_retryable_status_exhausts_attempts_and_returns_last_response() -> None:
    calls = 0

    async def op() -> Resp:
        nonlocal calls
        calls += 1
        return Resp(503)

    rec = Recorder()
    resp = await fetch_with_retry(op, RetryOptions(attempts=3, base_delay_s=0.01), sleep=rec.sleep)
    assert calls == 3
    assert resp.status == 503
    assert rec.delays == [pytest.approx(0.01), pytest.approx(0.02)]


@pytest.mark.asyncio
async def test_success_after_transient_status() -> None:
    replies = [Resp(429), Resp(200)]

    async def op() -> Resp:
        return replies.pop(0)

    rec = Recorder()
    resp = await fetch_with_retry(op, RetryOptions(attempts=3, base_delay_s=0.5), sleep=rec.sleep)
    assert resp.status == 200
    assert rec.delays == [pytest.approx(0.5)]


@pytest.mark.asyncio
async def test_non_retryable_status_returns_immediately() -> None:
    calls = 0

    async def op() -> Resp:
        nonlocal calls
        calls += 1
        return Resp(404)

    rec = Recorder()
    resp = await fetch_with_retry(op, RetryOptions(attempts=5, base_delay_s=0.01), sleep=rec.sleep)
    assert resp.status == 404
    assert calls == 1
    assert rec.delays == []


@pytest.mark.asyncio
async def test_transport_fault_reraised_after_last_attempt() -> None:
    calls = 0

    async def op() -> Resp:
        nonlocal calls
        calls += 1
        raise aiohttp.ClientConnectionError("connection reset")

    rec = Recorder()
    with pytest.raises(aiohttp.ClientConnectionError):
        await fetch_with_retry(op, RetryOptions(attempts=3, base_delay_s=0.01), sleep=rec.sleep)
    assert calls == 3
    assert rec.delays == [pytest.approx(0.01), pytest.approx(0.02)]


@pytest.mark.asyncio
async def test_timeout_then_success() -> None:
    outcomes: List[object] = [asyncio.TimeoutError(), Resp(200)]

    async def op() -> Resp:
        item = outcomes.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item  # type: ignore[return-value]

    rec = Recorder()
    resp = await fetch_with_retry(op, RetryOptions(attempts=2, base_delay_s=0.1), sleep=rec.sleep)
    assert resp.status == 200
    assert rec.delays == [pytest.approx(0.1)]


@pytest.mark.asyncio
async def test_programming_errors_are_not_retried() -> None:
    calls = 0

    async def op() -> Resp:
        nonlocal calls
        calls += 1
        raise KeyError("boom")

    rec = Recorder()
    with pytest.raises(KeyError):
        await fetch_with_retry(op, RetryOptions(attempts=3, base_delay_s=0.01), sleep=rec.sleep)
    assert calls == 1
    assert rec.delays == []


@pytest.mark.asyncio
async def test_single_attempt_never_waits() -> None:
    async def op() -> Resp:
        return Resp(503)

    rec = Recorder()
    resp = await fetch_with_retry(op, RetryOptions(attempts=1, base_delay_s=1.0), sleep=rec.sleep)
    assert resp.status == 503
    assert rec.delays == []


@pytest.mark.asyncio
async def test_retry_waits_are_counted() -> None:
    METRICS.reset()

    async def op() -> Resp:
        return Resp(502)

    rec = Recorder()
    await fetch_with_retry(op, RetryOptions(attempts=3, base_delay_s=0.0), sleep=rec.sleep)
    assert METRICS.counter("retry_waits_total") == 2
    assert METRICS.reasons("retry_by_status") == {"502": 2}


def test_retry_options_reject_zero_attempts() -> None:
    with pytest.raises(ValueError):
        RetryOptions(attempts=0)


@pytest.mark.asyncio
async def test_final_fault_after_retryable_status_is_raised() -> None:
    outcomes: List[object] = [Resp(503), aiohttp.ServerDisconnectedError()]

    async def op() -> Resp:
        item = outcomes.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item  # type: ignore[return-value]

    rec = Recorder()
    with pytest.raises(aiohttp.ServerDisconnectedError):
        await fetch_with_retry(op, RetryOptions(attempts=2, base_delay_s=0.01), sleep=rec.sleep)
    assert rec.delays == [pytest.approx(0.01)]

"""Shared fixtures: raw upstream records and fake HTTP transports."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def gamma_event() -> Callable[..., dict[str, Any]]:
    """Factory for Gamma /events records; index drives id, title and volume."""

    def make(i: int, **overrides: Any) -> dict[str, Any]:
        record = {
            "id": str(1000 + i),
            "title": f"Market number {i}",
            "question": f"Will thing {i} happen?",
            "volume": str(10_000 - i),
            "liquidity": 500 + i,
            "endDate": "2026-12-31T00:00:00Z",
            "active": True,
            "closed": False,
            "outcomes": '["Yes", "No"]',
            "outcomePrices": '["0.6", "0.4"]',
            "createdAt": "2026-01-01T00:00:00Z",
        }
        record.update(overrides)
        return record

    return make


@pytest.fixture
def kalshi_event() -> Callable[..., dict[str, Any]]:
    """Factory for Kalshi events with nested markets."""

    def make(ticker: str, markets: list[dict[str, Any]], **overrides: Any) -> dict[str, Any]:
        event = {
            "event_ticker": ticker,
            "title": f"Event {ticker}",
            "sub_title": "",
            "category": "Economics",
            "markets": markets,
        }
        event.update(overrides)
        return event

    return make


@pytest.fixture
def kalshi_market() -> Callable[..., dict[str, Any]]:
    def make(ticker: str, event_ticker: str, **overrides: Any) -> dict[str, Any]:
        market = {
            "ticker": ticker,
            "event_ticker": event_ticker,
            "title": f"Market {ticker}",
            "status": "active",
            "yes_bid": 40,
            "yes_ask": 42,
            "no_bid": 58,
            "no_ask": 60,
            "last_price": 41,
            "volume": 100,
            "volume_24h": 10,
            "liquidity": 5000,
            "open_interest": 50,
            "open_time": "2026-01-01T00:00:00Z",
            "close_time": "2027-01-01T00:00:00Z",
        }
        market.update(overrides)
        return market

    return make


def paged_transport(records: list[dict[str, Any]], calls: list[int] | None = None) -> httpx.MockTransport:
    """Serve `records` through limit/offset query params like the Gamma API."""

    def handler(request: httpx.Request) -> httpx.Response:
        offset = int(request.url.params.get("offset", 0))
        limit = int(request.url.params.get("limit", 100))
        if calls is not None:
            calls.append(offset)
        return httpx.Response(200, json=records[offset : offset + limit])

    return httpx.MockTransport(handler)


@pytest.fixture
def gamma_transport() -> Callable[..., httpx.MockTransport]:
    return paged_transport


@pytest.fixture
def status_transport() -> Callable[..., httpx.MockTransport]:
    """Transport that answers every request with the given status and JSON body."""

    def make(status: int, body: Any = None) -> httpx.MockTransport:
        return httpx.MockTransport(lambda request: httpx.Response(status, json=body))

    return make

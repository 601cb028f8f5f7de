"""Kalshi Trade API v2 client - events with nested markets."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
import structlog

from predboard.ingestion.aggregator import Deduplicator
from predboard.ingestion.base import DiscoveryResult, UpstreamError, VenueConnector
from predboard.ingestion.kalshi.normalize import normalize_events, normalize_market
from predboard.models import KalshiMarket

log = structlog.get_logger(__name__)

KALSHI_API_BASE = "https://api.elections.kalshi.com/trade-api/v2"


class KalshiConnector(VenueConnector):
    """Kalshi markets, fetched as one page of events with nested markets."""

    venue_id = "kalshi"

    def __init__(
        self,
        base_url: str = KALSHI_API_BASE,
        *,
        events_limit: int = 200,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)
        self.events_limit = events_limit

    def fetch_events(self) -> list[Any]:
        data = self.get_json(
            "/events",
            params={"with_nested_markets": "true", "limit": self.events_limit},
        )
        events = data.get("events") if isinstance(data, dict) else None
        if not isinstance(events, list):
            raise UpstreamError(self.venue_id, "Invalid response format from Kalshi API")
        log.info("kalshi_events", count=len(events))
        return events

    def normalize_market(self, raw: dict[str, Any], **kwargs: Any) -> KalshiMarket:
        return normalize_market(raw, kwargs.get("event"), now=kwargs.get("now"))

    def discover_markets(self, now: datetime | None = None, **kwargs: Any) -> DiscoveryResult[KalshiMarket]:
        """All nested markets of the fetched events, unique by ticker, highest volume first.

        Titles are not deduplicated: options of one event often share a title.
        """
        dedup = Deduplicator(dedupe_titles=False)
        for market in normalize_events(self.fetch_events(), now=now):
            dedup.add(market, market.id)
        markets: list[KalshiMarket] = sorted(dedup.accepted, key=lambda m: m.volume, reverse=True)
        return DiscoveryResult(markets=markets, duplicates_skipped=dedup.skipped, pages_fetched=1)

"""Polymarket Gamma API client - paginated event listing, dedup, normalization."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
import structlog

from predboard.ingestion.aggregator import Deduplicator, collect_pages
from predboard.ingestion.base import DiscoveryResult, VenueConnector
from predboard.ingestion.polymarket.normalize import display_title, normalize_market
from predboard.models import Market

log = structlog.get_logger(__name__)

GAMMA_API_BASE = "https://gamma-api.polymarket.com"


def _dedup_key(record: dict[str, Any]) -> tuple[str | None, str]:
    record_id = record.get("id")
    return (str(record_id) if record_id not in (None, "") else None), display_title(record)


class PolymarketConnector(VenueConnector):
    """Active Polymarket events, highest volume first."""

    venue_id = "polymarket"

    def __init__(
        self,
        base_url: str = GAMMA_API_BASE,
        *,
        page_size: int = 100,
        max_pages: int = 5,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)
        self.page_size = page_size
        self.max_pages = max_pages

    def fetch_page(self, offset: int, limit: int) -> Any:
        log.info("gamma_fetch", offset=offset, limit=limit)
        return self.get_json(
            "/events",
            params={
                "active": "true",
                "closed": "false",
                "limit": limit,
                "offset": offset,
                "order": "volume",
                "ascending": "false",
            },
        )

    def normalize_market(self, raw: dict[str, Any], **kwargs: Any) -> Market:
        return normalize_market(raw, **kwargs)

    def discover_markets(self, now: datetime | None = None, **kwargs: Any) -> DiscoveryResult[Market]:
        """Fetch up to max_pages pages, drop duplicates and inactive markets, sort by volume desc.

        Raises UpstreamError if any page request fails.
        """
        dedup = Deduplicator(dedupe_titles=True)
        pages = collect_pages(
            self.fetch_page,
            dedup,
            _dedup_key,
            page_size=self.page_size,
            max_pages=self.max_pages,
        )
        markets = []
        for raw in dedup.accepted:
            if raw.get("active") is not True or raw.get("closed") is True:
                continue
            try:
                markets.append(self.normalize_market(raw, now=now))
            except ValueError as e:
                log.warning("skip_market", market_id=raw.get("id"), error=str(e))
        markets.sort(key=lambda m: m.volume, reverse=True)
        if dedup.missing_id:
            log.info("skipped_missing_id", count=dedup.missing_id)
        return DiscoveryResult(markets=markets, duplicates_skipped=dedup.skipped, pages_fetched=pages)

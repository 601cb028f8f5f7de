"""Abstract connector for pluggable venues (Polymarket, Kalshi, ...)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx
import structlog

from predboard.models import Market

log = structlog.get_logger(__name__)

M = TypeVar("M", bound=Market)


class UpstreamError(Exception):
    """Upstream API failed (non-2xx, transport error, or missing top-level payload)."""

    def __init__(self, venue: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.venue = venue
        self.status_code = status_code


@dataclass
class DiscoveryResult(Generic[M]):
    """Normalized markets from one fetch session plus dedup bookkeeping."""

    markets: list[M] = field(default_factory=list)
    duplicates_skipped: int = 0
    pages_fetched: int = 0


class VenueConnector(ABC):
    """Abstract venue connector: REST discovery + normalization. Implement for each exchange."""

    venue_id: str = ""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET base_url + path and decode JSON. Any failure raises UpstreamError."""
        url = f"{self.base_url}{path}"
        log.debug("upstream_get", venue=self.venue_id, url=url, params=params)
        try:
            resp = self._client.get(url, params=params, headers={"accept": "application/json"})
        except httpx.RequestError as e:
            raise UpstreamError(self.venue_id, f"{self.venue_id} request failed: {e}") from e
        if resp.is_error:
            raise UpstreamError(
                self.venue_id,
                f"{self.venue_id} API returned status {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(self.venue_id, f"{self.venue_id} API returned invalid JSON") from e

    @abstractmethod
    def normalize_market(self, raw: dict[str, Any], **kwargs: Any) -> Market:
        """Convert one raw venue record to the canonical Market."""
        ...

    @abstractmethod
    def discover_markets(self, **kwargs: Any) -> DiscoveryResult:
        """Fetch, deduplicate and normalize the venue's current markets."""
        ...

"""Venue connectors: fetch, deduplicate and normalize upstream market listings."""

from predboard.ingestion.base import DiscoveryResult, UpstreamError, VenueConnector

__all__ = ["DiscoveryResult", "UpstreamError", "VenueConnector"]

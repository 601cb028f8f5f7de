"""Kalshi Trade API connector and normalizer."""

from predboard.ingestion.kalshi.client import KalshiConnector

__all__ = ["KalshiConnector"]

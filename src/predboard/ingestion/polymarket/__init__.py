"""Polymarket Gamma connector and normalizer."""

from predboard.ingestion.polymarket.gamma import PolymarketConnector

__all__ = ["PolymarketConnector"]

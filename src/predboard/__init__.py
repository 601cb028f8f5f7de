"""predboard - prediction market aggregation across Polymarket and Kalshi."""

__version__ = "0.1.0"

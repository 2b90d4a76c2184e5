"""PriceLens: price-history resolution and statistics service."""

__version__ = "0.4.0"

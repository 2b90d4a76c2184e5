"""
Read-only repository layer for PriceLens.

Usage:
    from pricelens.db.repositories import CatalogRepository, PriceEventRepository

    catalog = CatalogRepository(session)
    product = await catalog.find_latest_match(criteria)
"""

from pricelens.db.repositories.base_repo import BaseRepository
from pricelens.db.repositories.catalog_repo import CatalogRepository
from pricelens.db.repositories.price_event_repo import PriceEventRepository

__all__ = [
    "BaseRepository",
    "CatalogRepository",
    "PriceEventRepository",
]

"""
ORM → Pydantic mapping helpers for PriceLens.

Converts catalog rows (CatalogProduct + supplier name) and event-log rows
(PriceChangeEvent) into the read-only domain records the engine works on.
Timestamps are normalized to timezone-aware UTC; some drivers (SQLite)
return naive datetimes even for ``timezone=True`` columns.
"""

from datetime import UTC, datetime

from pricelens.core.models import PriceChangeRecord, ProductRecord
from pricelens.db.models import CatalogProduct, PriceChangeEvent


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def product_record_from_row(
    product: CatalogProduct,
    supplier_name: str | None,
) -> ProductRecord:
    """
    Map a CatalogProduct row and its supplier name to a ProductRecord.

    Args:
        product: The catalog row.
        supplier_name: Name from the supplier registry, or None if the
            supplier row is missing.
    """
    return ProductRecord(
        id=product.id,
        model=product.model,
        brand=product.brand or "",
        storage=product.storage or "",
        color=product.color or "",
        supplier=supplier_name,
        price=float(product.price),
        updated_at=as_utc(product.last_updated_at),
    )


def price_change_from_event(event: PriceChangeEvent) -> PriceChangeRecord:
    """Map a PriceChangeEvent row to a PriceChangeRecord."""
    return PriceChangeRecord(
        model=event.model,
        supplier=event.supplier,
        new_price=float(event.new_price),
        created_at=as_utc(event.created_at),
    )

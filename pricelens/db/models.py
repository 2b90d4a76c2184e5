"""
SQLAlchemy 2.0 ORM mappings for the catalog tables PriceLens reads.

The tables are owned and written by the catalog ingestion pipeline.
Only the columns the resolution engine needs are mapped; column names
follow the existing schema (``ultima_atualizacao`` is the catalog's
last-updated timestamp).
"""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


# ─── Supplier Registry ───────────────────────────────────────


class Supplier(Base):
    """A supplier whose price lists feed the catalog."""

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    products: Mapped[list["CatalogProduct"]] = relationship(back_populates="supplier")


# ─── Catalog ─────────────────────────────────────────────────


class CatalogProduct(Base):
    """Current snapshot of a sellable good as listed by one supplier."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    model: Mapped[str] = mapped_column(Text, nullable=False)
    brand: Mapped[str] = mapped_column(Text, nullable=False)
    storage: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[str] = mapped_column(Text, nullable=False)
    supplier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("suppliers.id"), nullable=False
    )
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_updated_at: Mapped[datetime | None] = mapped_column(
        "ultima_atualizacao", DateTime(timezone=True), default=utc_now, nullable=True
    )

    supplier: Mapped["Supplier"] = relationship(back_populates="products")


# ─── Price-Change Event Log ──────────────────────────────────


class PriceChangeEvent(Base):
    """Append-only record of a price transition for a model+supplier pair."""

    __tablename__ = "price_change_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[str] = mapped_column(Text, nullable=False)
    model: Mapped[str] = mapped_column(Text, nullable=False)
    supplier: Mapped[str] = mapped_column(Text, nullable=False)
    old_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    new_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_price_change_events_model_supplier_time", "model", "supplier", "created_at"),
    )

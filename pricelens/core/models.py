"""
Pydantic domain models for PriceLens.

These models represent the data flowing through the resolution pipeline:
PriceHistoryQuery → ProductRecord → [PricePoint] → PriceStatistics → PriceHistoryResult

API-facing models serialize with camelCase aliases (``currentPrice``,
``priceHistory``) to match the contract consumed by the chart widgets.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Request ──────────────────────────────────────────────────


class PriceHistoryQuery(_CamelModel):
    """A validated price-history lookup request."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    model: str | None = None
    brand: str | None = None
    storage: str | None = None
    color: str | None = None
    supplier: str | None = None
    product_id: int | None = Field(default=None, ge=1)
    limit: int = Field(default=100, ge=1)


# ─── Matching ─────────────────────────────────────────────────


class CatalogField(StrEnum):
    """Catalog fields a lookup can filter on."""
    ID = "id"
    MODEL = "model"
    BRAND = "brand"
    STORAGE = "storage"
    COLOR = "color"
    SUPPLIER = "supplier"


class MatchCriterion(BaseModel):
    """One predicate of a catalog lookup: exact identifier or case-insensitive substring."""

    model_config = ConfigDict(frozen=True)

    field: CatalogField
    value: str | int
    exact: bool = False


# ─── Collaborator Records ─────────────────────────────────────


class ProductRecord(BaseModel):
    """Current catalog snapshot of a sellable good (read-only)."""

    id: int
    model: str
    brand: str = ""
    storage: str = ""
    color: str = ""
    supplier: str | None = None
    price: float = Field(..., ge=0)
    updated_at: datetime | None = None


class PriceChangeRecord(BaseModel):
    """An immutable price transition for a model+supplier pair."""

    model: str
    supplier: str
    new_price: float
    created_at: datetime


# ─── Results ──────────────────────────────────────────────────


class PricePoint(_CamelModel):
    """One point of a price series, real or synthesized."""

    price: float
    timestamp: datetime


class PriceStatistics(_CamelModel):
    """Aggregate metrics derived from a price series. Never persisted."""

    min_price: float
    max_price: float
    avg_price: float
    price_change: float
    price_change_percentage: float
    volatility: float


class PriceHistoryResult(_CamelModel):
    """The unit of response and of caching."""

    product_id: str
    model: str
    brand: str
    supplier: str
    storage: str
    color: str
    current_price: float
    price_history: list[PricePoint] = Field(..., min_length=1)
    statistics: PriceStatistics
    last_updated: datetime
    is_synthetic: bool = False

    @model_validator(mode="after")
    def history_is_chronological(self) -> "PriceHistoryResult":
        stamps = [p.timestamp for p in self.price_history]
        if any(later < earlier for earlier, later in zip(stamps, stamps[1:])):
            raise ValueError("price_history must be sorted ascending by timestamp")
        return self

    @property
    def data_points(self) -> int:
        return len(self.price_history)


class PriceHistoryMeta(_CamelModel):
    data_points: int = 0
    has_insufficient_data: bool = False
    is_synthetic: bool = False


class PriceHistoryEnvelope(_CamelModel):
    """Response wrapper used by the authenticated endpoint."""

    success: bool = True
    data: PriceHistoryResult | None = None
    message: str | None = None
    meta: PriceHistoryMeta = Field(default_factory=PriceHistoryMeta)

"""
Shared test fixtures for the PriceLens test suite.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import pytest

from pricelens.core.interfaces import ICatalogReader, IEventLogReader
from pricelens.core.models import MatchCriterion, PriceChangeRecord, ProductRecord

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


class FakeCatalog(ICatalogReader):
    """Catalog double returning a fixed record and recording every lookup."""

    def __init__(self, product: ProductRecord | None = None, error: Exception | None = None):
        self.product = product
        self.error = error
        self.calls: list[list[MatchCriterion]] = []

    async def find_latest_match(self, criteria: Sequence[MatchCriterion]) -> ProductRecord | None:
        self.calls.append(list(criteria))
        if self.error is not None:
            raise self.error
        return self.product


class FakeEventLog(IEventLogReader):
    """Event-log double returning a fixed event list (capped at ``limit``)."""

    def __init__(self, events: list[PriceChangeRecord] | None = None, error: Exception | None = None):
        self.events = events or []
        self.error = error
        self.calls: list[tuple[str, str | None, int]] = []

    async def list_events(self, model: str, supplier: str, limit: int) -> list[PriceChangeRecord]:
        self.calls.append((model, supplier, limit))
        if self.error is not None:
            raise self.error
        return self.events[:limit]


def make_events(
    prices: Sequence[float],
    model: str = "Alpha-128",
    supplier: str = "Acme",
    start: datetime = NOW - timedelta(days=10),
) -> list[PriceChangeRecord]:
    """Build ascending daily events with the given prices."""
    return [
        PriceChangeRecord(
            model=model,
            supplier=supplier,
            new_price=price,
            created_at=start + timedelta(days=i),
        )
        for i, price in enumerate(prices)
    ]


@pytest.fixture
def alpha_product() -> ProductRecord:
    """The single catalog record used by the engine scenarios."""
    return ProductRecord(
        id=42,
        model="Alpha-128",
        brand="Acme Devices",
        storage="128GB",
        color="Midnight",
        supplier="Acme",
        price=999.90,
        updated_at=NOW,
    )


@pytest.fixture
def five_events() -> list[PriceChangeRecord]:
    return make_events([1049.90, 1029.90, 1019.90, 1009.90, 999.90])


@pytest.fixture
def event_factory():
    """Factory for ascending PriceChangeRecord lists (see ``make_events``)."""
    return make_events


@pytest.fixture
def catalog(alpha_product) -> FakeCatalog:
    return FakeCatalog(alpha_product)


@pytest.fixture
def event_log(five_events) -> FakeEventLog:
    return FakeEventLog(five_events)

"""
Abstract base classes for the data sources PriceLens reads from.

The catalog and the price-change event log are owned by the ingestion
pipeline. The resolution engine depends only on these contracts, so the
SQLAlchemy repositories can be swapped for in-memory fakes in tests.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pricelens.core.models import MatchCriterion, PriceChangeRecord, ProductRecord


class ICatalogReader(ABC):
    """Field-filtered, identifier-keyed product lookup ordered by recency."""

    @abstractmethod
    async def find_latest_match(
        self,
        criteria: Sequence[MatchCriterion],
    ) -> ProductRecord | None:
        """
        Find the most recently updated product satisfying every supplied criterion.

        Args:
            criteria: Non-empty conjunction of predicates to apply.

        Returns:
            The freshest matching ProductRecord, or None if nothing matches.

        Raises:
            CatalogUnavailableError: If the catalog cannot be read.
        """
        ...


class IEventLogReader(ABC):
    """Model+supplier-filtered, timestamp-ordered price-change events."""

    @abstractmethod
    async def list_events(
        self,
        model: str,
        supplier: str,
        limit: int,
    ) -> list[PriceChangeRecord]:
        """
        List price-change events for a model+supplier pair, oldest first.

        Args:
            model: Substring matched case-insensitively against event models.
            supplier: Substring matched case-insensitively against event suppliers.
            limit: Maximum number of events to return.

        Raises:
            EventLogUnavailableError: If the event log cannot be read.
        """
        ...

"""
Price-change event repository.

Reads the append-only event log written by the ingestion pipeline,
filtered by model and supplier, oldest first.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pricelens.core.exceptions import EventLogUnavailableError
from pricelens.core.interfaces import IEventLogReader
from pricelens.core.models import PriceChangeRecord
from pricelens.db.mappers import price_change_from_event
from pricelens.db.models import PriceChangeEvent
from pricelens.db.repositories.base_repo import BaseRepository


class PriceEventRepository(BaseRepository[PriceChangeEvent], IEventLogReader):
    """Repository for timestamp-ordered price-change event queries."""

    unavailable_error = EventLogUnavailableError

    def __init__(self, session: AsyncSession):
        super().__init__(session, PriceChangeEvent)

    async def list_events(
        self,
        model: str,
        supplier: str,
        limit: int,
    ) -> list[PriceChangeRecord]:
        """
        List events whose model and supplier contain the given values.

        Matching is case-insensitive substring, mirroring the catalog
        matcher's tolerance. The first ``limit`` events in ascending
        timestamp order are returned.

        Args:
            model: Model name of the resolved product.
            supplier: Supplier name of the resolved product.
            limit: Maximum number of events to return.
        """
        stmt = select(PriceChangeEvent).where(
            PriceChangeEvent.model.icontains(model, autoescape=True),
            PriceChangeEvent.supplier.icontains(supplier, autoescape=True),
        )
        stmt = stmt.order_by(
            PriceChangeEvent.created_at.asc(),
            PriceChangeEvent.id.asc(),
        ).limit(limit)

        result = await self._execute(stmt)
        return [price_change_from_event(e) for e in result.scalars().all()]

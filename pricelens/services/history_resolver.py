"""
History resolver: assembles the price series for a matched product.

Uses recorded price-change events when there are enough of them to show
a trend; otherwise falls back to the synthetic generator.
"""

import logging
from dataclasses import dataclass

from pricelens.core.interfaces import IEventLogReader
from pricelens.core.models import PricePoint, ProductRecord
from pricelens.services.synthetic_history import SyntheticHistoryGenerator

logger = logging.getLogger(__name__)

MIN_REAL_EVENTS = 2


@dataclass(frozen=True)
class ResolvedHistory:
    points: list[PricePoint]
    is_synthetic: bool
    event_count: int


class HistoryResolver:
    """
    Resolves a product's price history, oldest point first.

    At least ``min_events`` real events are required; a single point
    cannot convey direction or volatility. Products with no supplier
    are never matched against the event log, since the log is keyed by
    model and supplier together.
    """

    def __init__(
        self,
        events: IEventLogReader,
        generator: SyntheticHistoryGenerator | None = None,
        min_events: int = MIN_REAL_EVENTS,
    ):
        if min_events < 1:
            raise ValueError("min_events must be >= 1")
        self._events = events
        self._generator = generator or SyntheticHistoryGenerator()
        self._min_events = min_events

    async def resolve(self, product: ProductRecord, limit: int) -> ResolvedHistory:
        """
        Resolve at most ``limit`` points for ``product``.

        Raises:
            EventLogUnavailableError: If the event log lookup fails.
        """
        if product.supplier:
            events = await self._events.list_events(product.model, product.supplier, limit)
            logger.info(
                "Found %d price change events for %s", len(events), product.model,
            )
        else:
            events = []
            logger.info("No supplier for %s; skipping event log lookup", product.model)

        if len(events) >= self._min_events:
            points = sorted(
                (PricePoint(price=e.new_price, timestamp=e.created_at) for e in events),
                key=lambda p: p.timestamp,
            )
            return ResolvedHistory(points=points, is_synthetic=False, event_count=len(events))

        logger.warning(
            "Insufficient price history for %s (%d events); using synthetic series",
            product.model, len(events),
        )
        points = self._generator.generate(product.price, product_id=product.id)
        # Keep the most recent points so today's exact price survives the cap.
        return ResolvedHistory(
            points=points[-limit:],
            is_synthetic=True,
            event_count=len(events),
        )

"""
Price history resolution service.

Control flow per request:

    raw params → QueryNormalizer → cache lookup
      hit  → cached PriceHistoryResult
      miss → ProductMatcher → HistoryResolver (→ SyntheticHistoryGenerator)
             → PriceStatisticsCalculator → cache store → result

Authentication is not handled here; the HTTP layer wraps this single
engine with whatever capability check a route needs.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pricelens.core.interfaces import ICatalogReader, IEventLogReader
from pricelens.core.models import PriceHistoryQuery, PriceHistoryResult
from pricelens.services.cache_service import TTLCache
from pricelens.services.history_resolver import MIN_REAL_EVENTS, HistoryResolver
from pricelens.services.price_statistics import PriceStatisticsCalculator
from pricelens.services.product_matcher import ProductMatcher
from pricelens.services.query_normalizer import QueryNormalizer
from pricelens.services.synthetic_history import SyntheticHistoryGenerator

logger = logging.getLogger(__name__)

UNKNOWN_SUPPLIER = "Unknown"


class PriceHistoryService:
    """
    Resolves fuzzy product descriptions to cached price histories.

    Returns None when no catalog record matches. Raises
    QueryValidationError for unusable requests and CollaboratorError
    subclasses when the catalog or event log cannot be read.
    """

    def __init__(
        self,
        catalog: ICatalogReader,
        events: IEventLogReader,
        cache: TTLCache[PriceHistoryResult],
        normalizer: QueryNormalizer | None = None,
        generator: SyntheticHistoryGenerator | None = None,
        calculator: PriceStatisticsCalculator | None = None,
        min_events: int = MIN_REAL_EVENTS,
    ):
        self._cache = cache
        self._normalizer = normalizer or QueryNormalizer()
        self._matcher = ProductMatcher(catalog)
        self._resolver = HistoryResolver(events, generator=generator, min_events=min_events)
        self._calculator = calculator or PriceStatisticsCalculator()

    async def resolve(self, raw: Mapping[str, Any]) -> PriceHistoryResult | None:
        """Validate raw request parameters and resolve them."""
        query = self._normalizer.normalize(raw)
        return await self.resolve_query(query)

    async def resolve_query(self, query: PriceHistoryQuery) -> PriceHistoryResult | None:
        """Resolve an already validated query, served from cache when fresh."""
        key = self._normalizer.cache_key(query)
        return await self._cache.get_or_load(key, lambda: self._build(query))

    async def _build(self, query: PriceHistoryQuery) -> PriceHistoryResult | None:
        product = await self._matcher.match(query)
        if product is None:
            return None

        history = await self._resolver.resolve(product, query.limit)
        statistics = self._calculator.calculate(product.price, history.points)

        result = PriceHistoryResult(
            product_id=str(product.id),
            model=product.model,
            brand=product.brand,
            supplier=product.supplier or UNKNOWN_SUPPLIER,
            storage=product.storage,
            color=product.color,
            current_price=product.price,
            price_history=history.points,
            statistics=statistics,
            last_updated=product.updated_at or datetime.now(UTC),
            is_synthetic=history.is_synthetic,
        )
        logger.info(
            "Price history resolved for %s with %d data points",
            product.model, result.data_points,
            extra={"synthetic": history.is_synthetic, "events": history.event_count},
        )
        return result

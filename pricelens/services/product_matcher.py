"""
Product matcher: resolves a validated query to at most one catalog record.

The matcher decides which predicates apply; the catalog reader translates
them into a single recency-ordered lookup.
"""

import logging

from pricelens.core.exceptions import QueryValidationError
from pricelens.core.interfaces import ICatalogReader
from pricelens.core.models import CatalogField, MatchCriterion, PriceHistoryQuery, ProductRecord

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    CatalogField.MODEL,
    CatalogField.BRAND,
    CatalogField.STORAGE,
    CatalogField.COLOR,
    CatalogField.SUPPLIER,
)


def build_criteria(query: PriceHistoryQuery) -> list[MatchCriterion]:
    """
    Build the conjunction of predicates for a query.

    A ``product_id`` is sufficient on its own: it yields a single exact
    criterion and the descriptive fields are not applied as filters.
    Every other supplied field becomes a case-insensitive substring match.
    """
    if query.product_id is not None:
        return [MatchCriterion(field=CatalogField.ID, value=query.product_id, exact=True)]

    return [
        MatchCriterion(field=field, value=getattr(query, field.value))
        for field in _TEXT_FIELDS
        if getattr(query, field.value)
    ]


class ProductMatcher:
    """Finds the freshest catalog record satisfying a query."""

    def __init__(self, catalog: ICatalogReader):
        self._catalog = catalog

    async def match(self, query: PriceHistoryQuery) -> ProductRecord | None:
        """
        Resolve ``query`` to a ProductRecord.

        Returns:
            The most recently updated matching record, or None when the
            catalog has no match (a normal outcome, not an error).

        Raises:
            QueryValidationError: If the query carries no usable criteria.
            CatalogUnavailableError: If the catalog lookup fails.
        """
        criteria = build_criteria(query)
        if not criteria:
            raise QueryValidationError("At least one search criteria must be provided")

        product = await self._catalog.find_latest_match(criteria)
        if product is None:
            logger.info(
                "No matching product found",
                extra={"criteria": [c.field.value for c in criteria]},
            )
            return None

        logger.info(
            "Matched product %s (%s) from %s",
            product.id, product.model, product.supplier or "unknown supplier",
        )
        return product

"""
Catalog repository: resolves match criteria to the freshest product row.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from pricelens.core.exceptions import CatalogUnavailableError, QueryValidationError
from pricelens.core.interfaces import ICatalogReader
from pricelens.core.models import CatalogField, MatchCriterion, ProductRecord
from pricelens.db.mappers import product_record_from_row
from pricelens.db.models import CatalogProduct, Supplier
from pricelens.db.repositories.base_repo import BaseRepository

_COLUMNS = {
    CatalogField.ID: CatalogProduct.id,
    CatalogField.MODEL: CatalogProduct.model,
    CatalogField.BRAND: CatalogProduct.brand,
    CatalogField.STORAGE: CatalogProduct.storage,
    CatalogField.COLOR: CatalogProduct.color,
    CatalogField.SUPPLIER: Supplier.name,
}


def _condition(criterion: MatchCriterion) -> ColumnElement[bool]:
    column = _COLUMNS[criterion.field]
    if criterion.exact:
        return column == criterion.value
    # autoescape: '%' and '_' typed by a user match literally
    return column.icontains(str(criterion.value), autoescape=True)


class CatalogRepository(BaseRepository[CatalogProduct], ICatalogReader):
    """Read access to the product catalog joined with the supplier registry."""

    unavailable_error = CatalogUnavailableError

    def __init__(self, session: AsyncSession):
        super().__init__(session, CatalogProduct)

    async def find_latest_match(
        self,
        criteria: Sequence[MatchCriterion],
    ) -> ProductRecord | None:
        """
        Find the most recently updated product matching every criterion.

        Products whose supplier row is missing are still returned, with
        ``supplier=None``, unless a supplier criterion is present.

        Raises:
            QueryValidationError: If ``criteria`` is empty.
            CatalogUnavailableError: If the catalog cannot be read.
        """
        if not criteria:
            raise QueryValidationError("At least one search criteria must be provided")

        stmt = (
            select(CatalogProduct, Supplier.name)
            .outerjoin(Supplier, Supplier.id == CatalogProduct.supplier_id)
            .where(*(_condition(c) for c in criteria))
            .order_by(
                CatalogProduct.last_updated_at.desc().nulls_last(),
                CatalogProduct.id.desc(),
            )
            .limit(1)
        )
        result = await self._execute(stmt)
        row = result.first()
        if row is None:
            return None
        product, supplier_name = row
        return product_record_from_row(product, supplier_name)

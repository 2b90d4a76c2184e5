"""
Price history API endpoints.

Provides:
- GET    /api/v1/price-history         Authenticated lookup, enveloped response
- GET    /api/v1/price-history/simple  Unauthenticated lookup, bare result or null
- DELETE /api/v1/price-history/cache   Drop every cached resolution

Both lookups run the same resolution engine; they differ only in the
capability check and the response shape.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from pricelens.api.deps import EngineState, get_engine_state, get_price_history_service
from pricelens.core.models import PriceHistoryEnvelope, PriceHistoryMeta, PriceHistoryResult
from pricelens.middleware.auth_middleware import get_current_user
from pricelens.services.price_history_service import PriceHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/price-history", tags=["Price History"])


def lookup_params(
    model: str | None = Query(default=None, description="Model name (substring, case-insensitive)"),
    brand: str | None = Query(default=None),
    storage: str | None = Query(default=None, description="Storage variant, e.g. 128GB"),
    color: str | None = Query(default=None),
    supplier: str | None = Query(default=None, description="Supplier name (substring)"),
    product_id: str | None = Query(default=None, alias="productId"),
    limit: str | None = Query(default=None, description="Max history points (1-1000, default 100)"),
) -> dict[str, str | None]:
    """
    Collect raw lookup parameters.

    Values stay untyped here; QueryNormalizer is the single place that
    coerces and validates them.
    """
    return {
        "model": model,
        "brand": brand,
        "storage": storage,
        "color": color,
        "supplier": supplier,
        "productId": product_id,
        "limit": limit,
    }


@router.get("", response_model=PriceHistoryEnvelope, summary="Get price history")
async def get_price_history(
    params: dict = Depends(lookup_params),
    user: dict = Depends(get_current_user),
    service: PriceHistoryService = Depends(get_price_history_service),
):
    """
    Resolve a product description to its price history and statistics.

    Requires a valid access token in the Authorization header. When no
    catalog record matches, ``data`` is null and ``success`` stays true.
    """
    logger.info("Price history request", extra={"user_id": user.get("sub")})
    result = await service.resolve(params)

    if result is None:
        return PriceHistoryEnvelope(data=None, message="No matching product found")

    return PriceHistoryEnvelope(
        data=result,
        meta=PriceHistoryMeta(
            data_points=result.data_points,
            has_insufficient_data=result.is_synthetic,
            is_synthetic=result.is_synthetic,
        ),
    )


@router.get(
    "/simple",
    response_model=PriceHistoryResult | None,
    summary="Get price history (no auth)",
)
async def get_price_history_simple(
    params: dict = Depends(lookup_params),
    state: EngineState = Depends(get_engine_state),
    service: PriceHistoryService = Depends(get_price_history_service),
):
    """
    Unauthenticated variant returning the bare result, or null when no
    product matches. Disabled with ``PUBLIC_PRICE_HISTORY_ENABLED=false``.
    """
    if not state.public_enabled:
        raise HTTPException(status_code=404, detail="Not Found")
    return await service.resolve(params)


@router.delete("/cache", summary="Clear price history cache")
async def clear_price_history_cache(
    user: dict = Depends(get_current_user),
    state: EngineState = Depends(get_engine_state),
):
    """Drop every cached resolution, e.g. after a catalog re-import."""
    cleared = state.cache.clear()
    logger.info("Price history cache cleared", extra={"cleared": cleared, "user_id": user.get("sub")})
    return {"cleared": cleared}

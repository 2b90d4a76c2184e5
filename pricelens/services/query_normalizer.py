"""
Query normalization for price-history lookups.

Turns loosely-typed request parameters (query-string values, JSON bodies,
keyword dicts) into a validated PriceHistoryQuery, and derives a canonical
cache key from it. Pure: no I/O, no shared state.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pricelens.core.exceptions import QueryValidationError
from pricelens.core.models import PriceHistoryQuery

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

# Cache-key field order. Changing it invalidates every cached key.
KEY_FIELDS = ("product_id", "model", "brand", "storage", "color", "supplier", "limit")

_ALIASES = {
    "productId": "product_id",
    "product_id": "product_id",
    "model": "model",
    "brand": "brand",
    "storage": "storage",
    "color": "color",
    "supplier": "supplier",
    "limit": "limit",
}


class QueryNormalizer:
    """
    Validates raw lookup parameters and builds stable cache keys.

    Bound policy: ``limit`` outside ``1..max_limit`` is rejected, not clamped.
    """

    def __init__(self, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
        self.default_limit = default_limit
        self.max_limit = max_limit

    def normalize(self, raw: Mapping[str, Any]) -> PriceHistoryQuery:
        """
        Validate raw parameters into a PriceHistoryQuery.

        Unknown keys are ignored. Blank strings count as absent.

        Raises:
            QueryValidationError: If a field cannot be coerced, ``limit`` is
                out of bounds, or neither ``model`` nor ``productId`` is given.
        """
        fields: dict[str, Any] = {}
        for key, value in raw.items():
            name = _ALIASES.get(key)
            if name is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            if value is None:
                continue
            fields[name] = value
        fields.setdefault("limit", self.default_limit)

        try:
            query = PriceHistoryQuery.model_validate(fields)
        except ValidationError as e:
            raise QueryValidationError(
                "Invalid query parameters",
                errors=[
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in e.errors()
                ],
            ) from e

        if query.limit > self.max_limit:
            raise QueryValidationError(
                "Invalid query parameters",
                errors=[{
                    "field": "limit",
                    "message": f"Input should be less than or equal to {self.max_limit}",
                }],
            )

        if not query.model and query.product_id is None:
            raise QueryValidationError("Either model or productId is required")

        return query

    def cache_key(self, query: PriceHistoryQuery) -> str:
        """
        Serialize a query in fixed field order.

        Text criteria are lower-cased the way the database lower-cases
        them for ILIKE, so ``{"model": "Alpha"}`` and ``{"model": "alpha"}``
        share a key. Unicode case folding is not applied: "Straße" and
        "STRASSE" match different rows and get different keys.
        """
        parts: dict[str, Any] = {}
        for name in KEY_FIELDS:
            value = getattr(query, name)
            if isinstance(value, str):
                value = value.lower()
            parts[name] = value
        return json.dumps(parts, separators=(",", ":"))

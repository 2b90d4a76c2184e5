"""Dependency injection for the price history routes."""

from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pricelens.config import Settings
from pricelens.core.interfaces import ICatalogReader, IEventLogReader
from pricelens.core.models import PriceHistoryResult
from pricelens.db.database import get_db
from pricelens.db.repositories.catalog_repo import CatalogRepository
from pricelens.db.repositories.price_event_repo import PriceEventRepository
from pricelens.services.cache_service import TTLCache
from pricelens.services.price_history_service import PriceHistoryService
from pricelens.services.query_normalizer import QueryNormalizer
from pricelens.services.synthetic_history import (
    SyntheticHistoryGenerator,
    seed_policy_from_name,
)


@dataclass
class EngineState:
    """Long-lived engine collaborators, attached to app.state at startup."""

    cache: TTLCache[PriceHistoryResult]
    normalizer: QueryNormalizer
    generator: SyntheticHistoryGenerator
    min_events: int
    public_enabled: bool

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineState":
        return cls(
            cache=TTLCache(
                ttl_seconds=settings.price_history_cache_ttl_seconds,
                sweep_threshold=settings.price_history_cache_sweep_threshold,
                max_entries=settings.price_history_cache_max_entries,
            ),
            normalizer=QueryNormalizer(
                default_limit=settings.price_history_default_limit,
                max_limit=settings.price_history_max_limit,
            ),
            generator=SyntheticHistoryGenerator(
                days_back=settings.synthetic_history_days,
                seed_policy=seed_policy_from_name(settings.synthetic_seed_policy),
            ),
            min_events=settings.synthetic_history_min_events,
            public_enabled=settings.public_price_history_enabled,
        )


def get_engine_state(request: Request) -> EngineState:
    """Dependency: retrieve EngineState from the application."""
    return request.app.state.engine


def get_catalog_reader(db: AsyncSession = Depends(get_db)) -> ICatalogReader:
    return CatalogRepository(db)


def get_event_log_reader(db: AsyncSession = Depends(get_db)) -> IEventLogReader:
    return PriceEventRepository(db)


def get_price_history_service(
    state: EngineState = Depends(get_engine_state),
    catalog: ICatalogReader = Depends(get_catalog_reader),
    events: IEventLogReader = Depends(get_event_log_reader),
) -> PriceHistoryService:
    """Dependency: a per-request service over the shared cache."""
    return PriceHistoryService(
        catalog=catalog,
        events=events,
        cache=state.cache,
        normalizer=state.normalizer,
        generator=state.generator,
        min_events=state.min_events,
    )

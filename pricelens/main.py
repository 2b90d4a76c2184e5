"""
PriceLens FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from pricelens import __version__
from pricelens.api.deps import EngineState
from pricelens.api.v1 import price_history
from pricelens.config import get_settings
from pricelens.core.health import get_health_status
from pricelens.core.logging_config import setup_logging
from pricelens.core.sentry_config import init_sentry
from pricelens.db.database import engine, get_db
from pricelens.middleware.exception_handler import register_exception_handlers
from pricelens.middleware.logging_middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle management."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{__version__} ({settings.app_env.value})")
    yield
    cleared = app.state.engine.cache.clear()
    await engine.dispose()
    logger.info(f"Shutting down {settings.app_name} (dropped {cleared} cached histories)")


def create_app() -> FastAPI:
    """Application factory: creates and configures the FastAPI instance."""
    settings = get_settings()

    # 1. Configure structured logging (before anything else)
    setup_logging(
        app_env=settings.app_env,
        log_level=settings.log_level,
        log_format=settings.log_format,
        service=settings.app_name,
        version=__version__,
    )

    # 2. Initialize Sentry (before app creation so ASGI integration hooks in)
    init_sentry(
        dsn=settings.sentry_dsn,
        app_env=settings.app_env,
        app_version=__version__,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        profiles_sample_rate=settings.sentry_profiles_sample_rate,
    )

    openapi_tags = [
        {
            "name": "Price History",
            "description": "Resolve a product description to its price history and statistics.",
        },
        {
            "name": "System",
            "description": "Health checks and operational endpoints.",
        },
    ]

    app = FastAPI(
        title=settings.app_name,
        description=(
            "PriceLens resolves a fuzzy product description (model, brand, storage, "
            "color, supplier, or catalog id) to the best-matching catalog record and "
            "returns its price history with min/max/average, trend, and volatility.\n\n"
            "**Authentication:** `/api/v1/price-history` requires a JWT Bearer token; "
            "`/api/v1/price-history/simple` is public unless disabled."
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        redirect_slashes=False,
    )

    # One engine state (cache included) per application instance
    app.state.engine = EngineState.from_settings(settings)

    # Middleware order: Logging → GZip → CORS (LIFO, so CORS is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    if settings.is_development:
        cors_origins = ["http://localhost:5173"]
    elif settings.cors_allowed_origins:
        cors_origins = [o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()]
    else:
        cors_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "DELETE"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["System"])
    async def health_check(request: Request, db: AsyncSession = Depends(get_db)):
        return await get_health_status(
            app_name=settings.app_name,
            app_version=__version__,
            app_env=settings.app_env.value,
            db_session=db,
            cache=request.app.state.engine.cache,
        )

    app.include_router(price_history.router, prefix="/api/v1")

    # Register global exception handlers (after routers)
    register_exception_handlers(app)

    return app


app = create_app()

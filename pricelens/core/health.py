"""
Health check with dependency probes.

Checks:
- Application: always up if responding
- Database: execute ``SELECT 1`` via async session
- Price history cache: entry count and hit/miss counters

Returns 200 with ``"healthy"`` or ``"degraded"`` status, never 503.
Load balancers check for 200; the body indicates component health.
"""

import logging
import time
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pricelens.services.cache_service import TTLCache

logger = logging.getLogger(__name__)


async def check_database(session: AsyncSession) -> dict:
    """
    Probe database connectivity.

    Returns:
        ``{"status": "up", "latency_ms": float}`` or
        ``{"status": "down", "error": str}``
    """
    try:
        start = time.monotonic()
        await session.execute(text("SELECT 1"))
        latency = round((time.monotonic() - start) * 1000, 1)
        return {"status": "up", "latency_ms": latency}
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return {"status": "down", "error": type(e).__name__}


async def get_health_status(
    app_name: str,
    app_version: str,
    app_env: str,
    db_session: AsyncSession | None = None,
    cache: TTLCache | None = None,
) -> dict:
    """
    Build complete health status response.

    Overall status is ``"healthy"`` if the database probe passes (or no
    session was supplied), ``"degraded"`` otherwise.
    """
    components: dict[str, dict] = {}

    if db_session is not None:
        components["database"] = await check_database(db_session)
    if cache is not None:
        components["cache"] = {"status": "up", **cache.stats()}

    all_up = all(c["status"] == "up" for c in components.values())
    overall = "healthy" if all_up else "degraded"

    return {
        "status": overall,
        "app": app_name,
        "version": app_version,
        "environment": app_env,
        "timestamp": datetime.now(UTC).isoformat(),
        "components": components,
    }

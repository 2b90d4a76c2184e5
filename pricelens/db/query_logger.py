"""
Slow query detection via SQLAlchemy engine events.

Hooks into before_cursor_execute / after_cursor_execute to measure
query wall-clock time. Catalog and event-log lookups exceeding the
configured threshold are logged as warnings with the SQL statement
and duration.
"""

import logging
import time

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

STATEMENT_PREVIEW_CHARS = 500


def attach_query_logger(engine: AsyncEngine, threshold_ms: int) -> None:
    """
    Attach cursor timing events to the sync engine underlying ``engine``.

    Args:
        engine: The async SQLAlchemy engine to instrument.
        threshold_ms: Queries at or above this duration are logged.
    """
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start_times = conn.info.get("query_start_time")
        if not start_times:
            return
        elapsed_ms = (time.perf_counter() - start_times.pop()) * 1000.0

        if elapsed_ms >= threshold_ms:
            logger.warning(
                "slow_query_detected",
                extra={
                    "duration_ms": round(elapsed_ms, 2),
                    "threshold_ms": threshold_ms,
                    "statement": statement[:STATEMENT_PREVIEW_CHARS],
                },
            )

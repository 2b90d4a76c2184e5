"""
Sentry error tracking configuration for PriceLens.

Initializes Sentry SDK with FastAPI, Starlette, and asyncio integrations.
Expected client errors (4xx HTTPException, query validation failures)
are dropped before sending.

When ``dsn`` is empty (the default), Sentry is completely disabled.
"""

import logging

import sentry_sdk
from fastapi import HTTPException
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from pricelens.config import AppEnv
from pricelens.core.exceptions import CollaboratorError, PriceLensError, QueryValidationError


def init_sentry(
    dsn: str,
    app_env: AppEnv,
    app_version: str,
    traces_sample_rate: float = 0.1,
    profiles_sample_rate: float = 0.1,
) -> None:
    """
    Initialize Sentry SDK for error tracking and performance monitoring.

    Args:
        dsn: Sentry DSN. Empty string disables Sentry entirely.
        app_env: Current environment (used as Sentry ``environment``).
        app_version: Application version (used as Sentry ``release``).
        traces_sample_rate: Fraction of transactions to trace (0.0–1.0).
        profiles_sample_rate: Fraction of transactions to profile (0.0–1.0).
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=app_env.value,
        release=f"pricelens@{app_version}",
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            AsyncioIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        before_send=_filter_events,
        send_default_pii=False,
    )


def _filter_events(event: dict, hint: dict) -> dict | None:
    """
    Filter Sentry events before sending.

    - Drops 4xx HTTPException and QueryValidationError events.
    - Tags PriceLensError subclasses with their type and, for
      collaborator failures, the failing data source.
    """
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]

        if isinstance(exc_value, HTTPException) and exc_value.status_code < 500:
            return None
        if isinstance(exc_value, QueryValidationError):
            return None

        if isinstance(exc_value, PriceLensError):
            event.setdefault("tags", {})
            event["tags"]["error_type"] = type(exc_value).__name__
            if isinstance(exc_value, CollaboratorError):
                event["tags"]["collaborator"] = exc_value.source
            if exc_value.details:
                event["extra"] = {**event.get("extra", {}), **exc_value.details}

    return event

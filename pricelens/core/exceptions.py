"""
Custom exception hierarchy for PriceLens.

All application-specific exceptions inherit from PriceLensError,
enabling catch-all handling at the API layer while allowing
fine-grained handling in business logic.

"No matching product" is deliberately NOT an exception: the matcher
returns ``None`` and the API renders an empty result.
"""


class PriceLensError(Exception):
    """Base exception for all PriceLens application errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ─── Request Errors ───────────────────────────────────────────


class QueryValidationError(PriceLensError):
    """A price-history lookup request failed validation."""

    def __init__(self, message: str, errors: list[dict] | None = None, **kwargs):
        self.errors = errors or []
        super().__init__(message=message, **kwargs)


# ─── Collaborator Errors ──────────────────────────────────────


class CollaboratorError(PriceLensError):
    """A read against an external data source failed."""

    source: str = "collaborator"


class CatalogUnavailableError(CollaboratorError):
    """The product catalog could not be queried."""

    source = "catalog"


class EventLogUnavailableError(CollaboratorError):
    """The price-change event log could not be queried."""

    source = "event_log"

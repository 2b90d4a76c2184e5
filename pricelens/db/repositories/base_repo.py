"""
Generic async read-only repository base class.

The catalog tables are written by the ingestion pipeline, so repositories
here only read. Driver and connection failures are translated into the
repository's ``CollaboratorError`` subclass so callers never see
SQLAlchemy internals.
"""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from pricelens.core.exceptions import CollaboratorError
from pricelens.db.models import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common read operations.

    Subclasses specify the model class, the error raised when the
    backing table cannot be read, and entity-specific queries.
    """

    unavailable_error: type[CollaboratorError] = CollaboratorError

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def _execute(self, stmt: Executable) -> Result[Any]:
        """Execute a statement, translating driver errors."""
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as e:
            table = self.model.__tablename__
            logger.error(
                "collaborator_read_failed",
                extra={"table": table, "error": type(e).__name__},
            )
            raise self.unavailable_error(
                f"Failed to read from {table}",
                details={"table": table},
            ) from e

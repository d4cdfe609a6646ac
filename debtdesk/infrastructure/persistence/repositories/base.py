"""Base repository: get_by_id plus the store-availability guard shared by all repositories."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.domain.exceptions import StoreUnavailableException
from debtdesk.infrastructure.persistence.database import Base

logger = logging.getLogger(__name__)

# Connectivity failures; integrity and programming errors are not included.
STORE_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    OSError,
)


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id and guarded execute/flush.

    Every statement goes through _execute or _flush so an unreachable store
    surfaces as StoreUnavailableException (fail closed) instead of a driver error.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _execute(self, stmt: Any, operation: str) -> Any:
        try:
            return await self.db.execute(stmt)
        except STORE_ERRORS as exc:
            logger.error(
                "Store call failed during %s: %s", operation, exc.__class__.__name__
            )
            raise StoreUnavailableException(operation) from exc

    async def _flush(self, operation: str) -> None:
        try:
            await self.db.flush()
        except STORE_ERRORS as exc:
            logger.error(
                "Store flush failed during %s: %s", operation, exc.__class__.__name__
            )
            raise StoreUnavailableException(operation) from exc

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self._execute(
            select(self.model).where(model.id == entity_id),
            f"get_{model.__tablename__}",
        )
        return result.scalar_one_or_none()

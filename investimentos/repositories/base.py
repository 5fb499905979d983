"""
Generic async repository (Data Access Layer).

Implements the Repository pattern on top of SQLAlchemy's ``AsyncSession``.
Concrete repositories inherit from ``BaseRepository[T]`` and add their
entity-specific searches and aggregations.

Contract:
- Reads (``get``, ``get_all`` and the searches in subclasses) return plain
  records or ``None``; store errors propagate and surface as 500.
- Writes (``add``, ``update``, ``delete``) commit eagerly and report the
  outcome as a ``bool``. Any ``SQLAlchemyError`` during the write (FK or
  CHECK violation, lost connection) rolls the session back, is logged with
  the entity name and id, and yields ``False``.
"""

import logging
from decimal import Decimal
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


def to_decimal(value: Any) -> Decimal:
    """Normalise an aggregate result (``None``/int/float/Decimal) to ``Decimal``."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class BaseRepository(Generic[ModelType]):
    """
    Generic CRUD repository for SQLModel entities with an integer ``id``.

    Parameters
    ----------
    model : Type[ModelType]
        The SQLModel class this repository manages.
    db : AsyncSession
        An active async database session (injected per-request).
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    async def _all(self, stmt: Any) -> List[ModelType]:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _scalar(self, stmt: Any) -> Any:
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def _commit(self, action: str, identifier: Any) -> bool:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                "Failed to %s %s id=%s", action, self.entity_name, identifier,
                extra={"entity": self.entity_name},
            )
            return False
        return True

    async def get(self, id: int) -> Optional[ModelType]:
        """Fetch a single entity by primary key.  Returns ``None`` if not found."""
        return await self.db.get(self.model, id)

    async def get_all(self) -> List[ModelType]:
        """Return every entity, ordered by primary key."""
        return await self._all(select(self.model).order_by(self.model.id))

    async def count(self) -> int:
        return await self._scalar(select(func.count()).select_from(self.model))

    async def add(self, entity: ModelType) -> bool:
        """
        Insert ``entity``. On success the store-assigned id is available on
        ``entity.id``.
        """
        self.db.add(entity)
        if not await self._commit("add", "<new>"):
            return False
        await self.db.refresh(entity)
        logger.debug("Added %s id=%s", self.entity_name, entity.id)
        return True

    async def update(self, entity: ModelType) -> bool:
        """
        Replace every column of the stored record with the values on ``entity``.

        Returns ``False`` when no record with ``entity.id`` exists.
        """
        identifier = entity.id
        existing = await self.db.get(self.model, identifier) if identifier is not None else None
        if existing is None:
            logger.info("Update skipped: %s id=%s does not exist", self.entity_name, identifier)
            return False

        for column in self.model.__table__.columns.keys():
            if column != "id":
                setattr(existing, column, getattr(entity, column))
        return await self._commit("update", identifier)

    async def delete(self, id: int) -> bool:
        """Delete by primary key. ``False`` if absent or the store refused it."""
        entity = await self.db.get(self.model, id)
        if entity is None:
            logger.info("Delete skipped: %s id=%s does not exist", self.entity_name, id)
            return False
        await self.db.delete(entity)
        return await self._commit("delete", id)

"""
Generic async repository — CRUD over one mapped model.

Mutations commit the unit of work (and so pass through the before_flush
rule gate); any failure rolls the session back before the error is
re-raised as a domain error.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ems.core.exceptions import (DuplicateRecordError, EmployeeNotFoundError,
                                 InvalidArgumentError, InvalidEmployeeDataError,
                                 InvalidOperationError, PersistenceError)
from ems.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)

logger = logging.getLogger(__name__)


class Repository(Generic[ModelT]):
    model: type[ModelT]
    entity_name: str = "Entity"

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ── Query helpers ───────────────────────────────────────────────
    def _select(self) -> Select:
        return select(self.model)

    @staticmethod
    def _page(stmt: Select, skip: int = 0, limit: int | None = None) -> Select:
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    def _column(self, field: str):
        if field not in self.model.__table__.columns:
            raise InvalidArgumentError(
                f"{self.entity_name} has no field named '{field}'"
            )
        return getattr(self.model, field)

    async def _execute(self, stmt):
        try:
            return await self.db.execute(stmt)
        except InvalidEmployeeDataError:
            # Autoflush of pending changes hit the rule gate.
            await self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError(f"Error querying {self.entity_name.lower()} records") from exc

    async def _scalars(self, stmt) -> list[ModelT]:
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def _scalar(self, stmt) -> Any:
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except InvalidEmployeeDataError:
            await self.db.rollback()
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            reason = str(exc.orig).lower()
            if "unique" in reason or "duplicate" in reason:
                raise DuplicateRecordError(
                    f"Error {action} {self.entity_name.lower()}: a record with the same "
                    "unique value already exists"
                ) from exc
            if "foreign key" in reason:
                raise InvalidOperationError(
                    f"Error {action} {self.entity_name.lower()}: it is referenced by, "
                    "or references, another record"
                ) from exc
            raise PersistenceError(f"Error {action} {self.entity_name.lower()}") from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError(f"Error {action} {self.entity_name.lower()}") from exc

    async def _reload(self, entity_id: int) -> ModelT:
        stmt = (
            self._select()
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        entity = await self._scalar(stmt)
        if entity is None:
            raise EmployeeNotFoundError.for_id(entity_id, self.entity_name)
        return entity

    # ── Reads ───────────────────────────────────────────────────────
    async def get_by_id(self, entity_id: int) -> ModelT | None:
        return await self._scalar(self._select().where(self.model.id == entity_id))

    async def require(self, entity_id: int) -> ModelT:
        """Like :meth:`get_by_id` but a missing row is an error."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise EmployeeNotFoundError.for_id(entity_id, self.entity_name)
        return entity

    async def get_all(self, skip: int = 0, limit: int | None = None) -> list[ModelT]:
        stmt = self._select().order_by(self.model.id)
        return await self._scalars(self._page(stmt, skip, limit))

    async def get_all_ordered(self, field: str, ascending: bool = True) -> list[ModelT]:
        column = self._column(field)
        order = column.asc() if ascending else column.desc()
        return await self._scalars(self._select().order_by(order, self.model.id))

    async def find_by(self, **filters: Any) -> list[ModelT]:
        """Rows whose named columns equal the given values."""
        stmt = self._select()
        for field, value in filters.items():
            stmt = stmt.where(self._column(field) == value)
        return await self._scalars(stmt.order_by(self.model.id))

    async def count(self) -> int:
        result = await self._execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())

    # ── Writes ──────────────────────────────────────────────────────
    async def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self._commit("adding")
        logger.info("Added %s %d", self.entity_name.lower(), entity.id)
        return await self._reload(entity.id)

    async def update(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self._commit("updating")
        logger.info("Updated %s %d", self.entity_name.lower(), entity.id)
        return await self._reload(entity.id)

    async def _check_can_delete(self, entity: ModelT) -> None:
        """Hook for subclasses to refuse deleting a still-referenced row."""

    async def delete(self, entity_id: int) -> ModelT:
        entity = await self.require(entity_id)
        await self._check_can_delete(entity)
        await self.db.delete(entity)
        await self._commit("deleting")
        logger.info("Deleted %s %d", self.entity_name.lower(), entity_id)
        return entity

"""
Generic CRUD for UUID-keyed models.

Every operation runs inside the caller's session and only flushes; the
service or coordinator that opened the session decides when to commit.
Bulk deletes return the removed rows so callers can clean up whatever
lives outside the database (stored uploads, vectors).

Dependencies: sqlalchemy
System role: Shared persistence operations for the CRUD singletons
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lectern.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """Create/read/update/delete by primary key, plus filtered bulk delete."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """
        Insert a row and return it with server-side defaults loaded.

        Args:
            session: Caller's session
            **values: Column values

        Returns:
            The persisted instance (id and timestamps populated)
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update_by_id(self, session: AsyncSession, id: UUID, **values: Any) -> ModelT | None:
        """Apply column values to one row; None when the row is gone."""
        result = await session.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .returning(self.model)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Remove one row; False when nothing matched."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def delete_where(self, session: AsyncSession, condition: ColumnElement[bool]) -> Sequence[ModelT]:
        """
        Remove every row matching a condition.

        Args:
            session: Caller's session
            condition: SQLAlchemy boolean expression over the model

        Returns:
            The rows as they were before deletion
        """
        result = await session.execute(select(self.model).where(condition))
        rows = result.scalars().all()
        if rows:
            await session.execute(delete(self.model).where(condition))
        return rows

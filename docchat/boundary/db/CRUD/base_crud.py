"""
Base CRUD operations for SQLAlchemy models.

Generic create/read/update/delete helpers shared by the model-specific
CRUD classes. Methods flush but never commit: transaction boundaries
belong to the calling service.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **kwargs: Any) -> ModelT:
        """
        Insert one row and return it with generated defaults populated.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def create_many(
        self,
        session: AsyncSession,
        rows: Iterable[dict[str, Any]],
    ) -> list[ModelT]:
        """
        Insert several rows in one flush.

        Args:
            session: Async database session
            rows: Field mappings, one per row

        Returns:
            Created model instances in input order
        """
        instances = [self.model(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: UUID primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_many(self, session: AsyncSession, ids: Sequence[UUID]) -> int:
        """
        Delete every record whose primary key is in ids.

        Returns:
            Number of rows deleted
        """
        if not ids:
            return 0
        stmt = delete(self.model).where(self.model.id.in_(list(ids)))
        result = await session.execute(stmt)
        return result.rowcount

"""Generic CRUD base for models keyed by UUID."""

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.db.unit_of_work import UnitOfWork
from workledger.models._base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """CRUD operations with explicit transaction control.

    Writes commit immediately unless a ``UnitOfWork`` is passed, in which case
    they only flush and the caller commits.
    """

    def __init__(self, model: Type[ModelType]):
        """Bind to a model class."""
        self.model = model

    async def get(self, db: AsyncSession, id: UUID) -> Optional[ModelType]:
        """Get a single object by ID."""
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_for_update(self, db: AsyncSession, id: UUID) -> Optional[ModelType]:
        """Get a single object by ID and lock its row until the transaction ends.

        The row is re-read from the database even if already in the session.
        """
        query = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_multi(
        self, db: AsyncSession, *, ids: Optional[Sequence[UUID]] = None
    ) -> List[ModelType]:
        """Get all objects, or only those with the given IDs."""
        query = select(self.model)
        if ids is not None:
            query = query.where(self.model.id.in_(list(ids)))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, dict[str, Any]],
        uow: Optional[UnitOfWork] = None,
    ) -> ModelType:
        """Create a new object."""
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**values)
        db.add(db_obj)
        await self._persist(db, uow)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, dict[str, Any]],
        uow: Optional[UnitOfWork] = None,
    ) -> ModelType:
        """Set the given fields on an existing object."""
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field, value in values.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        await self._persist(db, uow)
        await db.refresh(db_obj)
        return db_obj

    async def remove(
        self, db: AsyncSession, *, id: UUID, uow: Optional[UnitOfWork] = None
    ) -> bool:
        """Delete an object by ID. Returns whether a row was deleted."""
        result = await db.execute(delete(self.model).where(self.model.id == id))
        await self._persist(db, uow)
        return result.rowcount > 0

    @staticmethod
    async def _persist(db: AsyncSession, uow: Optional[UnitOfWork]) -> None:
        if uow is None:
            await db.commit()
        else:
            await db.flush()

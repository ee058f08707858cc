"""
Primary-key CRUD shared by repositories.

Repositories flush but never commit; the request's session dependency
owns the transaction (see core/database.py).
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.exceptions import NotFoundError
from nicenote.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Subclasses set `model`, e.g. `class NoteRepository(BaseRepository[Note]): model = Note`."""

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_by_id(self, id: str) -> ModelType:
        """Raises NotFoundError when no row has this id."""
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found: {id}")
        return instance

    async def create(self, **values: Any) -> ModelType:
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **values: Any) -> ModelType:
        """
        Assign the given column values and flush.

        Raises:
            NotFoundError: no row has this id
            AttributeError: a key is not a column of the model
        """
        instance = await self.get_by_id(id)
        columns = self.model.__table__.columns.keys()
        for key, value in values.items():
            if key not in columns:
                raise AttributeError(f"{self.model.__name__} has no column {key!r}")
            setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> bool:
        """True when a row was removed. Deleting a missing id is not an error."""
        result = await self.session.execute(delete(self.model).where(self.model.id == id))
        await self.session.flush()
        return (result.rowcount or 0) > 0

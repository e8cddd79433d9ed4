from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar('T')
CreateSchemaType = TypeVar('CreateSchemaType')
UpdateSchemaType = TypeVar('UpdateSchemaType')


class BaseDAO(ABC, Generic[T, CreateSchemaType, UpdateSchemaType]):
    """Data access for one user-owned table. Every lookup is scoped by user_id."""

    model: Any

    def __init__(self, db: AsyncSession):
        self.db = db

    @abstractmethod
    async def create(self, obj_in: CreateSchemaType) -> T:
        pass

    @abstractmethod
    async def get(self, user_id: str, id: str) -> Optional[T]:
        pass

    @abstractmethod
    async def update(self, user_id: str, id: str, obj_in: UpdateSchemaType) -> Optional[T]:
        pass

    @abstractmethod
    async def delete(self, user_id: str, id: str) -> bool:
        pass

    async def delete_all_for_user(self, user_id: str) -> int:
        """Bulk delete every row owned by the user. Returns the row count."""
        try:
            result = await self.db.execute(
                sa_delete(self.model).where(self.model.user_id == user_id)
            )
            await self.db.commit()
            return result.rowcount or 0
        except Exception:
            await self.db.rollback()
            raise

from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ObjectEntity, Register, Schema

T = TypeVar("T")


class Mapper(Generic[T]):
    """Async SQLAlchemy mapper bound to one session and one model.

    Writes flush and refresh but never commit; the surrounding UnitOfWork
    owns the transaction.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    def _where(self, stmt, where: Optional[dict[str, Any]]):
        if not where:
            return stmt
        return stmt.where(and_(*[(getattr(self.model, k) == v) for k, v in where.items()]))

    async def get(self, id: int) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def find_by_uuid(self, uuid: str) -> Optional[T]:
        stmt = select(self.model).where(self.model.uuid == uuid)  # type: ignore[attr-defined]
        return (await self.session.execute(stmt)).scalars().first()

    async def list(self, *, where: Optional[dict[str, Any]] = None) -> Sequence[T]:
        stmt = self._where(select(self.model), where).order_by(self.model.id)  # type: ignore[attr-defined]
        return (await self.session.execute(stmt)).scalars().all()

    async def insert(self, entity: T) -> T:
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: T, **data) -> T:
        for k, v in data.items():
            setattr(entity, k, v)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, id: int) -> int:
        res = await self.session.execute(delete(self.model).where(self.model.id == id))  # type: ignore[attr-defined]
        return int(res.rowcount or 0)


class RegisterMapper(Mapper[Register]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Register)


class SchemaMapper(Mapper[Schema]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Schema)


class ObjectEntityMapper(Mapper[ObjectEntity]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ObjectEntity)

    async def find_for_register(self, register_id: int) -> Sequence[ObjectEntity]:
        return await self.list(where={"register": register_id})

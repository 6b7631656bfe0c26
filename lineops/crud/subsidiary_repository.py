# path: lineops/crud/subsidiary_repository.py
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.models import Subsidiary, User
from lineops.lines.models import Line


class ISubsidiaryRepository(Protocol):
    async def get(self, session: AsyncSession, subsidiary_id: int) -> Optional[Subsidiary]: ...
    async def list_all(self, session: AsyncSession) -> Sequence[Subsidiary]: ...
    async def create(self, session: AsyncSession, *, name: str) -> Subsidiary: ...
    async def rename(self, session: AsyncSession, subsidiary: Subsidiary, *, name: str) -> Subsidiary: ...
    async def count_references(self, session: AsyncSession, subsidiary_id: int) -> int: ...
    async def delete(self, session: AsyncSession, subsidiary_id: int) -> None: ...


class SubsidiaryRepository(ISubsidiaryRepository):
    async def get(self, session: AsyncSession, subsidiary_id: int) -> Optional[Subsidiary]:
        res = await session.execute(select(Subsidiary).where(Subsidiary.id == int(subsidiary_id)))
        return res.scalar_one_or_none()

    async def list_all(self, session: AsyncSession) -> Sequence[Subsidiary]:
        res = await session.execute(select(Subsidiary).order_by(Subsidiary.id.asc()))
        return list(res.scalars())

    async def create(self, session: AsyncSession, *, name: str) -> Subsidiary:
        obj = Subsidiary(name=name)
        session.add(obj)
        await session.flush()
        return obj

    async def rename(self, session: AsyncSession, subsidiary: Subsidiary, *, name: str) -> Subsidiary:
        subsidiary.name = name
        await session.flush()
        return subsidiary

    async def count_references(self, session: AsyncSession, subsidiary_id: int) -> int:
        """Сколько линий и пользователей ссылаются на дочернее общество."""
        lines = (
            await session.execute(select(func.count()).select_from(Line).where(Line.subsidiary_id == int(subsidiary_id)))
        ).scalar_one()
        users = (
            await session.execute(select(func.count()).select_from(User).where(User.subsidiary_id == int(subsidiary_id)))
        ).scalar_one()
        return int(lines) + int(users)

    async def delete(self, session: AsyncSession, subsidiary_id: int) -> None:
        await session.execute(delete(Subsidiary).where(Subsidiary.id == int(subsidiary_id)))

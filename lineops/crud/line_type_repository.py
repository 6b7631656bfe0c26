# path: lineops/crud/line_type_repository.py
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.lines.models import Line, LineRequest, LineType


class ILineTypeRepository(Protocol):
    async def get(self, session: AsyncSession, line_type_id: int) -> Optional[LineType]: ...
    async def get_by_code(self, session: AsyncSession, code: str) -> Optional[LineType]: ...
    async def list_all(self, session: AsyncSession) -> Sequence[LineType]: ...
    async def create(self, session: AsyncSession, *, code: str, title: str) -> LineType: ...
    async def retitle(self, session: AsyncSession, line_type: LineType, *, title: str) -> LineType: ...
    async def is_in_use(self, session: AsyncSession, code: str) -> bool: ...
    async def delete(self, session: AsyncSession, line_type_id: int) -> None: ...


class LineTypeRepository(ILineTypeRepository):
    """
    Справочник типов линий - реестр, по которому проверяется Line.type при каждой записи.
    """

    async def get(self, session: AsyncSession, line_type_id: int) -> Optional[LineType]:
        res = await session.execute(select(LineType).where(LineType.id == int(line_type_id)))
        return res.scalar_one_or_none()

    async def get_by_code(self, session: AsyncSession, code: str) -> Optional[LineType]:
        code = (code or "").strip()
        if not code:
            return None
        res = await session.execute(select(LineType).where(LineType.code == code))
        return res.scalar_one_or_none()

    async def list_all(self, session: AsyncSession) -> Sequence[LineType]:
        res = await session.execute(select(LineType).order_by(LineType.id.asc()))
        return list(res.scalars())

    async def create(self, session: AsyncSession, *, code: str, title: str) -> LineType:
        obj = LineType(code=code, title=title)
        session.add(obj)
        await session.flush()
        return obj

    async def retitle(self, session: AsyncSession, line_type: LineType, *, title: str) -> LineType:
        line_type.title = title
        await session.flush()
        return line_type

    async def is_in_use(self, session: AsyncSession, code: str) -> bool:
        lines = (
            await session.execute(select(func.count()).select_from(Line).where(Line.type == code))
        ).scalar_one()
        requests = (
            await session.execute(
                select(func.count()).select_from(LineRequest).where(LineRequest.requested_type == code)
            )
        ).scalar_one()
        return bool(lines or requests)

    async def delete(self, session: AsyncSession, line_type_id: int) -> None:
        await session.execute(delete(LineType).where(LineType.id == int(line_type_id)))

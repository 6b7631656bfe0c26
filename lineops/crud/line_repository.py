# path: lineops/crud/line_repository.py
from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.lines.models import Line


class ILineRepository(Protocol):
    async def get(self, session: AsyncSession, line_id: int, *, for_update: bool = False) -> Optional[Line]: ...
    async def get_by_number(self, session: AsyncSession, *, subsidiary_id: int, number: str) -> Optional[Line]: ...
    async def list_lines(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        in_fault_flow: Optional[bool] = None,
    ) -> Sequence[Line]: ...
    async def create(self, session: AsyncSession, **fields: Any) -> Line: ...
    async def update_fields(self, session: AsyncSession, line: Line, **fields: Any) -> Line: ...
    async def delete(self, session: AsyncSession, line_id: int) -> None: ...


class LineRepository(ILineRepository):
    """
    Репозиторий линий.

    Важно:
    - обновления идут через ORM-объект (не через update()), чтобы срабатывал version_id_col;
    - for_update=True берёт строку под SELECT ... FOR UPDATE (в sqlite игнорируется).
    """

    async def get(self, session: AsyncSession, line_id: int, *, for_update: bool = False) -> Optional[Line]:
        stmt = select(Line).where(Line.id == int(line_id))
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def get_by_number(self, session: AsyncSession, *, subsidiary_id: int, number: str) -> Optional[Line]:
        res = await session.execute(
            select(Line).where(Line.subsidiary_id == int(subsidiary_id), Line.number == number)
        )
        return res.scalar_one_or_none()

    async def list_lines(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        in_fault_flow: Optional[bool] = None,
    ) -> Sequence[Line]:
        stmt = select(Line).order_by(Line.id.asc())
        if subsidiary_id is not None:
            stmt = stmt.where(Line.subsidiary_id == int(subsidiary_id))
        if in_fault_flow is not None:
            stmt = stmt.where(Line.in_fault_flow.is_(bool(in_fault_flow)))
        res = await session.execute(stmt)
        return list(res.scalars())

    async def create(self, session: AsyncSession, **fields: Any) -> Line:
        line = Line(**fields)
        session.add(line)
        await session.flush()
        return line

    async def update_fields(self, session: AsyncSession, line: Line, **fields: Any) -> Line:
        if not fields:
            return line
        for key, value in fields.items():
            setattr(line, key, value)
        await session.flush()
        return line

    async def delete(self, session: AsyncSession, line_id: int) -> None:
        # faults удаляются каскадом (ondelete=CASCADE)
        await session.execute(delete(Line).where(Line.id == int(line_id)))

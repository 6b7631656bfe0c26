# path: lineops/crud/line_request_repository.py
from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.lines.models import LineRequest


class ILineRequestRepository(Protocol):
    async def get(self, session: AsyncSession, request_id: int, *, for_update: bool = False) -> Optional[LineRequest]: ...
    async def list_requests(self, session: AsyncSession, *, status: Optional[str] = None) -> Sequence[LineRequest]: ...
    async def create(self, session: AsyncSession, **fields: Any) -> LineRequest: ...
    async def update_fields(self, session: AsyncSession, request: LineRequest, **fields: Any) -> LineRequest: ...
    async def delete(self, session: AsyncSession, request_id: int) -> None: ...


class LineRequestRepository(ILineRequestRepository):
    async def get(self, session: AsyncSession, request_id: int, *, for_update: bool = False) -> Optional[LineRequest]:
        stmt = select(LineRequest).where(LineRequest.id == int(request_id))
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def list_requests(self, session: AsyncSession, *, status: Optional[str] = None) -> Sequence[LineRequest]:
        # новые сверху
        stmt = select(LineRequest).order_by(LineRequest.created_at.desc(), LineRequest.id.desc())
        if status:
            stmt = stmt.where(LineRequest.status == status)
        res = await session.execute(stmt)
        return list(res.scalars())

    async def create(self, session: AsyncSession, **fields: Any) -> LineRequest:
        obj = LineRequest(**fields)
        session.add(obj)
        await session.flush()
        return obj

    async def update_fields(self, session: AsyncSession, request: LineRequest, **fields: Any) -> LineRequest:
        for key, value in fields.items():
            setattr(request, key, value)
        await session.flush()
        return request

    async def delete(self, session: AsyncSession, request_id: int) -> None:
        await session.execute(delete(LineRequest).where(LineRequest.id == int(request_id)))

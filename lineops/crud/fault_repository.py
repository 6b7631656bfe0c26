# path: lineops/crud/fault_repository.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.lines.models import Fault, FaultStatus


class IFaultRepository(Protocol):
    async def get(self, session: AsyncSession, fault_id: int, *, for_update: bool = False) -> Optional[Fault]: ...
    async def list_faults(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        line_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Sequence[Fault]: ...
    async def list_unresolved_for_line(
        self, session: AsyncSession, line_id: int, *, for_update: bool = False
    ) -> Sequence[Fault]: ...
    async def create(self, session: AsyncSession, **fields: Any) -> Fault: ...
    async def update_fields(self, session: AsyncSession, fault: Fault, **fields: Any) -> Fault: ...
    async def resolve_many(
        self,
        session: AsyncSession,
        *,
        fault_ids: Sequence[int],
        feedback: str,
        resolved_at: datetime,
    ) -> int: ...
    async def fetch_by_ids(self, session: AsyncSession, fault_ids: Sequence[int]) -> Sequence[Fault]: ...
    async def count_by_status(self, session: AsyncSession) -> dict[str, int]: ...
    async def fetch_resolution_spans(self, session: AsyncSession) -> list[tuple[datetime, datetime]]: ...


class FaultRepository(IFaultRepository):
    """
    Репозиторий заявок о неисправностях.
    """

    async def get(self, session: AsyncSession, fault_id: int, *, for_update: bool = False) -> Optional[Fault]:
        stmt = select(Fault).where(Fault.id == int(fault_id))
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def list_faults(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        line_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Sequence[Fault]:
        stmt = select(Fault).order_by(Fault.declared_at.desc(), Fault.id.desc())
        if subsidiary_id is not None:
            stmt = stmt.where(Fault.subsidiary_id == int(subsidiary_id))
        if line_id is not None:
            stmt = stmt.where(Fault.line_id == int(line_id))
        if status:
            stmt = stmt.where(Fault.status == status)
        res = await session.execute(stmt)
        return list(res.scalars())

    async def list_unresolved_for_line(
        self, session: AsyncSession, line_id: int, *, for_update: bool = False
    ) -> Sequence[Fault]:
        stmt = (
            select(Fault)
            .where(Fault.line_id == int(line_id), Fault.status != FaultStatus.RESOLVED.value)
            .order_by(Fault.id.asc())
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return list(res.scalars())

    async def create(self, session: AsyncSession, **fields: Any) -> Fault:
        fault = Fault(**fields)
        session.add(fault)
        await session.flush()
        return fault

    async def update_fields(self, session: AsyncSession, fault: Fault, **fields: Any) -> Fault:
        if not fields:
            return fault
        for key, value in fields.items():
            setattr(fault, key, value)
        await session.flush()
        return fault

    async def resolve_many(
        self,
        session: AsyncSession,
        *,
        fault_ids: Sequence[int],
        feedback: str,
        resolved_at: datetime,
    ) -> int:
        """
        Принудительное закрытие заявок одним UPDATE.

        status != resolved повторяем в WHERE: если заявку успели закрыть между SELECT и UPDATE,
        она не будет перештампована. assigned_at ставим, только если его не было.
        version увеличиваем вручную: массовый UPDATE идёт мимо version_id_col.
        """
        if not fault_ids:
            return 0
        stmt = (
            update(Fault)
            .where(
                Fault.id.in_([int(i) for i in fault_ids]),
                Fault.status != FaultStatus.RESOLVED.value,
            )
            .values(
                status=FaultStatus.RESOLVED.value,
                resolved_at=resolved_at,
                feedback=feedback,
                assigned_at=func.coalesce(Fault.assigned_at, resolved_at),
                version=Fault.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        return int(res.rowcount or 0)

    async def fetch_by_ids(self, session: AsyncSession, fault_ids: Sequence[int]) -> Sequence[Fault]:
        if not fault_ids:
            return []
        res = await session.execute(
            select(Fault)
            .where(Fault.id.in_([int(i) for i in fault_ids]))
            .order_by(Fault.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(res.scalars())

    async def count_by_status(self, session: AsyncSession) -> dict[str, int]:
        res = await session.execute(select(Fault.status, func.count()).group_by(Fault.status))
        return {str(status): int(cnt) for status, cnt in res.all()}

    async def fetch_resolution_spans(self, session: AsyncSession) -> list[tuple[datetime, datetime]]:
        res = await session.execute(
            select(Fault.declared_at, Fault.resolved_at).where(
                Fault.status == FaultStatus.RESOLVED.value,
                Fault.resolved_at.is_not(None),
            )
        )
        return [(declared, resolved) for declared, resolved in res.all()]

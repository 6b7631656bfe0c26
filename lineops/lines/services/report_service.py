# path: lineops/lines/services/report_service.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.config import settings
from lineops.core.models.base import utcnow
from lineops.crud.fault_repository import FaultRepository, IFaultRepository
from lineops.crud.line_repository import ILineRepository, LineRepository
from lineops.crud.line_request_repository import ILineRequestRepository, LineRequestRepository
from lineops.lines.models import Fault, FaultStatus, Line, LineRequest


@dataclass
class MaintenanceStats:
    total: int
    open: int
    assigned: int
    resolved: int
    average_resolution_ms: Optional[int]


@dataclass
class Snapshot:
    lines: Sequence[Line]
    faults: Sequence[Fault]
    line_requests: Sequence[LineRequest]
    fetched_at: datetime
    refresh_after_seconds: int


def _as_utc(value: datetime) -> datetime:
    # sqlite отдаёт naive datetime, postgres - aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReportService:
    """
    Только чтение: статистика службы эксплуатации и снимок для опрашивающих клиентов.
    """

    def __init__(
        self,
        *,
        fault_repo: IFaultRepository | None = None,
        line_repo: ILineRepository | None = None,
        request_repo: ILineRequestRepository | None = None,
    ) -> None:
        self._faults = fault_repo or FaultRepository()
        self._lines = line_repo or LineRepository()
        self._requests = request_repo or LineRequestRepository()

    async def maintenance_stats(self, session: AsyncSession) -> MaintenanceStats:
        counts = await self._faults.count_by_status(session)
        spans = await self._faults.fetch_resolution_spans(session)

        average_ms: Optional[int] = None
        if spans:
            total_ms = sum(
                (_as_utc(resolved) - _as_utc(declared)).total_seconds() * 1000 for declared, resolved in spans
            )
            average_ms = int(round(total_ms / len(spans)))

        return MaintenanceStats(
            total=sum(counts.values()),
            open=counts.get(FaultStatus.OPEN.value, 0),
            assigned=counts.get(FaultStatus.ASSIGNED.value, 0),
            resolved=counts.get(FaultStatus.RESOLVED.value, 0),
            average_resolution_ms=average_ms,
        )

    async def snapshot(self, session: AsyncSession) -> Snapshot:
        fetched_at = utcnow()
        lines = await self._lines.list_lines(session)
        faults = await self._faults.list_faults(session)
        requests = await self._requests.list_requests(session)
        return Snapshot(
            lines=lines,
            faults=faults,
            line_requests=requests,
            fetched_at=fetched_at,
            refresh_after_seconds=settings.sync.refresh_interval_seconds,
        )

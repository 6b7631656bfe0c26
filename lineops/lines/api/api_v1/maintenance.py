# path: lineops/lines/api/api_v1/maintenance.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_report_service
from lineops.core.models.db_helper import db_helper
from lineops.lines.schemas import MaintenanceStatsRead, SnapshotRead
from lineops.lines.services.report_service import ReportService


router = APIRouter(tags=["Maintenance"])
snapshot_router = APIRouter(tags=["Snapshot"])


@router.get("/stats", response_model=MaintenanceStatsRead)
async def maintenance_stats(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[ReportService, Depends(get_report_service)],
):
    """
    Счётчики заявок по статусам и среднее время решения (мс).
    """
    return MaintenanceStatsRead.model_validate(await svc.maintenance_stats(session))


@snapshot_router.get("/snapshot", response_model=SnapshotRead)
async def snapshot(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[ReportService, Depends(get_report_service)],
):
    """
    Всё состояние для клиента одним запросом; клиент перечитывает его раз в refreshAfterSeconds.
    """
    return SnapshotRead.model_validate(await svc.snapshot(session))

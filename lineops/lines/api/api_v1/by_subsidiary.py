# path: lineops/lines/api/api_v1/by_subsidiary.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_lifecycle_service, get_line_service, get_subsidiary_repository
from lineops.core.exceptions import NotFoundError
from lineops.core.models.db_helper import db_helper
from lineops.crud.subsidiary_repository import ISubsidiaryRepository
from lineops.lines.schemas import FaultRead, LineRead
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService


# /subsidiaries/{id}/lines и /subsidiaries/{id}/faults
router = APIRouter(tags=["Subsidiaries"])


async def _require_subsidiary(session: AsyncSession, repo: ISubsidiaryRepository, subsidiary_id: int) -> None:
    if not await repo.get(session, subsidiary_id):
        raise NotFoundError(f"Subsidiary {subsidiary_id} not found")


@router.get("/{subsidiary_id}/lines", response_model=list[LineRead])
async def list_subsidiary_lines(
    subsidiary_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    svc: Annotated[LineService, Depends(get_line_service)],
):
    await _require_subsidiary(session, repo, subsidiary_id)
    return list(await svc.list_lines(session, subsidiary_id=subsidiary_id))


@router.get("/{subsidiary_id}/faults", response_model=list[FaultRead])
async def list_subsidiary_faults(
    subsidiary_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
):
    await _require_subsidiary(session, repo, subsidiary_id)
    return list(await svc.list_faults(session, subsidiary_id=subsidiary_id))

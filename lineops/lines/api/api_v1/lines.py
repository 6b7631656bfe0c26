# path: lineops/lines/api/api_v1/lines.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_lifecycle_service, get_line_service
from lineops.core.models.db_helper import db_helper
from lineops.lines.schemas import (
    ConfirmWorkingRead,
    FaultRead,
    LineCreate,
    LineRead,
    LineStatusUpdate,
    LineUpdate,
)
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService


router = APIRouter(tags=["Lines"])


@router.get("", response_model=list[LineRead])
async def list_lines(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
    subsidiary_id: Annotated[Optional[int], Query(alias="subsidiaryId")] = None,
    in_fault_flow: Annotated[Optional[bool], Query(alias="inFaultFlow")] = None,
):
    return list(await svc.list_lines(session, subsidiary_id=subsidiary_id, in_fault_flow=in_fault_flow))


@router.post("", response_model=LineRead, status_code=status.HTTP_201_CREATED)
async def create_line(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
    body: LineCreate,
):
    return await svc.create_line(
        session,
        number=body.number,
        line_type=body.type,
        subsidiary_id=body.subsidiary_id,
        location=body.location,
        establishment_date=body.establishment_date,
        status=body.status,
        in_fault_flow=body.in_fault_flow,
    )


@router.get("/{line_id}", response_model=LineRead)
async def get_line(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
):
    return await svc.get_line(session, line_id)


@router.patch("/{line_id}", response_model=LineRead)
async def update_line(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
    body: LineUpdate,
):
    """
    Частичное обновление линии: пишутся только переданные ключи.
    """
    fields = body.model_dump(exclude_unset=True)
    expected_version = fields.pop("expected_version", None)
    return await svc.update_line(session, line_id=line_id, fields=fields, expected_version=expected_version)


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
) -> Response:
    await svc.delete_line(session, line_id=line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{line_id}/status", response_model=LineRead)
async def set_line_status(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
    body: LineStatusUpdate,
):
    """
    Ручная установка статуса службой эксплуатации (заявки не трогаются).
    """
    return await svc.set_status(
        session,
        line_id=line_id,
        status=body.status,
        expected_version=body.expected_version,
    )


@router.patch("/{line_id}/toggle-fault-flow", response_model=LineRead)
async def toggle_fault_flow(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineService, Depends(get_line_service)],
):
    return await svc.toggle_fault_flow(session, line_id=line_id)


@router.post("/{line_id}/confirm-working", response_model=ConfirmWorkingRead)
async def confirm_working(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
):
    line, resolved = await svc.confirm_working(session, line_id=line_id)
    return ConfirmWorkingRead(
        line=LineRead.model_validate(line),
        resolved_faults=[FaultRead.model_validate(f) for f in resolved],
    )


@router.get("/{line_id}/faults", response_model=list[FaultRead])
async def list_line_faults(
    line_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    line_svc: Annotated[LineService, Depends(get_line_service)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
):
    await line_svc.get_line(session, line_id)
    return list(await svc.list_faults(session, line_id=line_id))

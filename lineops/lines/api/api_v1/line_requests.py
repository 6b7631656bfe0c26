# path: lineops/lines/api/api_v1/line_requests.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_line_request_service
from lineops.core.models.db_helper import db_helper
from lineops.lines.schemas import (
    ApprovalRead,
    LineRead,
    LineRequestApprove,
    LineRequestCreate,
    LineRequestRead,
    LineRequestReject,
)
from lineops.lines.services.request_workflow_service import LineRequestService


router = APIRouter(tags=["Line requests"])


@router.get("", response_model=list[LineRequestRead])
async def list_line_requests(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
    request_status: Annotated[Optional[str], Query(alias="status")] = None,
):
    return list(await svc.list_requests(session, status=request_status))


@router.post("", response_model=LineRequestRead, status_code=status.HTTP_201_CREATED)
async def create_line_request(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
    body: LineRequestCreate,
):
    return await svc.create_request(
        session,
        requested_type=body.requested_type,
        subsidiary_id=body.subsidiary_id,
        admin_id=body.admin_id,
    )


@router.get("/{request_id}", response_model=LineRequestRead)
async def get_line_request(
    request_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
):
    return await svc.get_request(session, request_id)


@router.post("/{request_id}/approve", response_model=ApprovalRead)
async def approve_line_request(
    request_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
    body: LineRequestApprove,
):
    """
    Одобрить запрос: создаётся линия с назначенным номером, запрос -> approved.
    """
    req, line = await svc.approve(session, request_id=request_id, assigned_number=body.assigned_number)
    return ApprovalRead(request=LineRequestRead.model_validate(req), line=LineRead.model_validate(line))


@router.post("/{request_id}/reject", response_model=LineRequestRead)
async def reject_line_request(
    request_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
    body: LineRequestReject,
):
    return await svc.reject(session, request_id=request_id, reason=body.reason)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line_request(
    request_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[LineRequestService, Depends(get_line_request_service)],
) -> Response:
    await svc.delete_request(session, request_id=request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

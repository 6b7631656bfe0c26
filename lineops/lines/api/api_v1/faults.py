# path: lineops/lines/api/api_v1/faults.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_lifecycle_service
from lineops.core.models.db_helper import db_helper
from lineops.lines.schemas import FaultAssign, FaultCreate, FaultFeedbackUpdate, FaultRead, FaultResolve
from lineops.lines.services.lifecycle_service import FaultLifecycleService


router = APIRouter(tags=["Faults"])


@router.get("", response_model=list[FaultRead])
async def list_faults(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
    subsidiary_id: Annotated[Optional[int], Query(alias="subsidiaryId")] = None,
    line_id: Annotated[Optional[int], Query(alias="lineId")] = None,
    fault_status: Annotated[Optional[str], Query(alias="status")] = None,
):
    return list(
        await svc.list_faults(session, subsidiary_id=subsidiary_id, line_id=line_id, status=fault_status)
    )


@router.post("", response_model=FaultRead, status_code=status.HTTP_201_CREATED)
async def declare_fault(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
    body: FaultCreate,
):
    """
    Заявить неисправность: заявка open + линия faulty в одной транзакции.
    """
    return await svc.declare_fault(
        session,
        line_id=body.line_id,
        declared_by=body.declared_by,
        symptoms=body.symptoms,
        probable_cause=body.probable_cause,
        subsidiary_id=body.subsidiary_id,
    )


@router.get("/{fault_id}", response_model=FaultRead)
async def get_fault(
    fault_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
):
    return await svc.get_fault(session, fault_id)


@router.patch("/{fault_id}/assign", response_model=FaultRead)
async def assign_fault(
    fault_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
    body: FaultAssign,
):
    return await svc.assign_fault(
        session,
        fault_id=fault_id,
        maintenance_user_id=body.maintenance_user_id,
        expected_version=body.expected_version,
    )


@router.patch("/{fault_id}/resolve", response_model=FaultRead)
async def resolve_fault(
    fault_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
    body: FaultResolve,
):
    return await svc.resolve_fault(
        session,
        fault_id=fault_id,
        feedback=body.feedback,
        expected_version=body.expected_version,
    )


@router.patch("/{fault_id}/feedback", response_model=FaultRead)
async def update_fault_feedback(
    fault_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    svc: Annotated[FaultLifecycleService, Depends(get_lifecycle_service)],
    body: FaultFeedbackUpdate,
):
    return await svc.update_feedback(session, fault_id=fault_id, feedback=body.feedback)

# path: lineops/lines/services/request_workflow_service.py
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.config import settings
from lineops.core.exceptions import ConflictError, NotFoundError, ValidationError, require_text
from lineops.core.models import UserRole
from lineops.core.models.base import utcnow
from lineops.crud.line_repository import ILineRepository, LineRepository
from lineops.crud.line_request_repository import ILineRequestRepository, LineRequestRepository
from lineops.crud.line_type_repository import ILineTypeRepository, LineTypeRepository
from lineops.crud.subsidiary_repository import ISubsidiaryRepository, SubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.crud.user_repository import IUserRepository, UserRepository
from lineops.lines.models import Line, LineRequest, LineRequestStatus, LineStatus


log = get_logger("lines.requests")


class LineRequestService:
    """
    Запросы на выделение линии: pending -> approved | rejected.

    Важно:
    - обработать запрос можно ровно один раз: статус перечитывается под блокировкой,
      не-pending -> ConflictError, линия при этом не создаётся;
    - одобрение = создание линии + отметка запроса в одной транзакции;
    - занятый номер в том же дочернем обществе -> ConflictError, запрос остаётся pending.
    """

    def __init__(
        self,
        *,
        request_repo: ILineRequestRepository | None = None,
        line_repo: ILineRepository | None = None,
        line_type_repo: ILineTypeRepository | None = None,
        subsidiary_repo: ISubsidiaryRepository | None = None,
        user_repo: IUserRepository | None = None,
    ) -> None:
        self._requests = request_repo or LineRequestRepository()
        self._lines = line_repo or LineRepository()
        self._line_types = line_type_repo or LineTypeRepository()
        self._subsidiaries = subsidiary_repo or SubsidiaryRepository()
        self._users = user_repo or UserRepository()

    async def list_requests(self, session: AsyncSession, *, status: Optional[str] = None) -> Sequence[LineRequest]:
        if status is not None and status not in {s.value for s in LineRequestStatus}:
            raise ValidationError(f"Unknown request status '{status}'", details={"field": "status"})
        return await self._requests.list_requests(session, status=status)

    async def get_request(self, session: AsyncSession, request_id: int) -> LineRequest:
        req = await self._requests.get(session, request_id)
        if not req:
            raise NotFoundError(f"Line request {request_id} not found")
        return req

    async def create_request(
        self,
        session: AsyncSession,
        *,
        requested_type: Optional[str],
        subsidiary_id: Optional[int],
        admin_id: Optional[int],
    ) -> LineRequest:
        type_code = require_text(requested_type, "requestedType")
        if not subsidiary_id:
            raise ValidationError("subsidiaryId is required", details={"field": "subsidiaryId"})
        if not admin_id:
            raise ValidationError("adminId is required", details={"field": "adminId"})

        async with transaction(session, op="create_line_request"):
            if not await self._line_types.get_by_code(session, type_code):
                raise ValidationError(f"Unknown line type '{type_code}'", details={"field": "requestedType"})
            if not await self._subsidiaries.get(session, subsidiary_id):
                raise NotFoundError(f"Subsidiary {subsidiary_id} not found", field="subsidiaryId")
            admin = await self._users.get_by_id(session, user_id=admin_id)
            if not admin:
                raise NotFoundError(f"User {admin_id} not found", field="adminId")
            if admin.role != UserRole.ADMIN.value:
                raise ValidationError(
                    f"User {admin.id} is not an admin",
                    details={"field": "adminId", "role": admin.role},
                )

            req = await self._requests.create(
                session,
                subsidiary_id=int(subsidiary_id),
                requested_type=type_code,
                admin_id=int(admin_id),
                status=LineRequestStatus.PENDING.value,
                created_at=utcnow(),
                assigned_number=None,
                rejection_reason=None,
                responded_at=None,
                line_id=None,
            )

        log.info({"event": "line_request_created", "request_id": int(req.id), "type": type_code})
        return req

    async def approve(
        self,
        session: AsyncSession,
        *,
        request_id: int,
        assigned_number: Optional[str],
    ) -> tuple[LineRequest, Line]:
        number = require_text(assigned_number, "assignedNumber")

        async with transaction(session, op="approve_line_request"):
            req = await self._require_pending(session, request_id)

            if not await self._line_types.get_by_code(session, req.requested_type):
                raise ValidationError(
                    f"Line type '{req.requested_type}' is no longer registered",
                    details={"field": "requestedType"},
                )
            if await self._lines.get_by_number(session, subsidiary_id=int(req.subsidiary_id), number=number):
                raise ConflictError(
                    f"Line number '{number}' already exists in subsidiary {req.subsidiary_id}",
                    details={"field": "assignedNumber"},
                )

            now = utcnow()
            line = await self._lines.create(
                session,
                number=number,
                type=req.requested_type,
                subsidiary_id=int(req.subsidiary_id),
                location=settings.lifecycle.provisioned_line_location,
                establishment_date=now,
                status=LineStatus.WORKING.value,
                last_checked=now,
                in_fault_flow=True,
            )
            await self._requests.update_fields(
                session,
                req,
                status=LineRequestStatus.APPROVED.value,
                assigned_number=number,
                responded_at=now,
                line_id=int(line.id),
            )

        log.info(
            {
                "event": "line_request_approved",
                "request_id": int(req.id),
                "line_id": int(line.id),
                "number": number,
            }
        )
        return req, line

    async def reject(self, session: AsyncSession, *, request_id: int, reason: Optional[str]) -> LineRequest:
        reason_text = require_text(reason, "reason")

        async with transaction(session, op="reject_line_request"):
            req = await self._require_pending(session, request_id)
            await self._requests.update_fields(
                session,
                req,
                status=LineRequestStatus.REJECTED.value,
                rejection_reason=reason_text,
                responded_at=utcnow(),
            )

        log.info({"event": "line_request_rejected", "request_id": int(req.id)})
        return req

    async def delete_request(self, session: AsyncSession, *, request_id: int) -> None:
        async with transaction(session, op="delete_line_request"):
            req = await self._requests.get(session, request_id, for_update=True)
            if not req:
                raise NotFoundError(f"Line request {request_id} not found")
            await self._requests.delete(session, int(req.id))

        log.info({"event": "line_request_deleted", "request_id": int(request_id)})

    async def _require_pending(self, session: AsyncSession, request_id: int) -> LineRequest:
        req = await self._requests.get(session, request_id, for_update=True)
        if not req:
            raise NotFoundError(f"Line request {request_id} not found")
        if req.status != LineRequestStatus.PENDING.value:
            raise ConflictError(
                f"Line request {req.id} is already {req.status}",
                details={"status": req.status},
            )
        return req

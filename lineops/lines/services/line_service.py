# path: lineops/lines/services/line_service.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.exceptions import ConflictError, NotFoundError, ValidationError, require_text
from lineops.core.models.base import utcnow
from lineops.crud.fault_repository import FaultRepository, IFaultRepository
from lineops.crud.line_repository import ILineRepository, LineRepository
from lineops.crud.line_type_repository import ILineTypeRepository, LineTypeRepository
from lineops.crud.subsidiary_repository import ISubsidiaryRepository, SubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.lines.models import Line, LineStatus
from lineops.lines.services.status_rules import check_direct_status, check_version, parse_line_status


log = get_logger("lines.line_service")

# поля, которые можно менять обычным PATCH /lines/{id}
_PATCHABLE = ("number", "type", "location", "establishment_date", "last_checked", "in_fault_flow")


class LineService:
    """
    CRUD линий + ручная установка статуса службой эксплуатации.

    Статус линии через PATCH никогда не пишется "как есть": он проходит те же правила,
    что и PATCH /lines/{id}/status (см. status_rules.check_direct_status).
    """

    def __init__(
        self,
        *,
        line_repo: ILineRepository | None = None,
        fault_repo: IFaultRepository | None = None,
        line_type_repo: ILineTypeRepository | None = None,
        subsidiary_repo: ISubsidiaryRepository | None = None,
    ) -> None:
        self._lines = line_repo or LineRepository()
        self._faults = fault_repo or FaultRepository()
        self._line_types = line_type_repo or LineTypeRepository()
        self._subsidiaries = subsidiary_repo or SubsidiaryRepository()

    async def list_lines(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        in_fault_flow: Optional[bool] = None,
    ) -> Sequence[Line]:
        return await self._lines.list_lines(session, subsidiary_id=subsidiary_id, in_fault_flow=in_fault_flow)

    async def get_line(self, session: AsyncSession, line_id: int) -> Line:
        line = await self._lines.get(session, line_id)
        if not line:
            raise NotFoundError(f"Line {line_id} not found")
        return line

    async def create_line(
        self,
        session: AsyncSession,
        *,
        number: Optional[str],
        line_type: Optional[str],
        subsidiary_id: Optional[int],
        location: Optional[str] = None,
        establishment_date: Optional[datetime] = None,
        status: Optional[str] = None,
        in_fault_flow: Optional[bool] = None,
    ) -> Line:
        number_text = require_text(number, "number")
        type_code = require_text(line_type, "type")
        if not subsidiary_id:
            raise ValidationError("subsidiaryId is required", details={"field": "subsidiaryId"})

        target = parse_line_status(status) if status is not None else LineStatus.WORKING
        # новая линия без заявок: faulty/maintenance ей взяться неоткуда
        check_direct_status(target, unresolved_faults=0)

        async with transaction(session, op="create_line"):
            await self._require_type(session, type_code)
            if not await self._subsidiaries.get(session, subsidiary_id):
                raise NotFoundError(f"Subsidiary {subsidiary_id} not found", field="subsidiaryId")
            await self._ensure_number_free(session, subsidiary_id=int(subsidiary_id), number=number_text)

            now = utcnow()
            line = await self._lines.create(
                session,
                number=number_text,
                type=type_code,
                subsidiary_id=int(subsidiary_id),
                location=(location or "").strip(),
                establishment_date=establishment_date or now,
                status=target.value,
                last_checked=now,
                in_fault_flow=True if in_fault_flow is None else bool(in_fault_flow),
            )

        log.info({"event": "line_created", "line_id": int(line.id), "number": line.number, "type": line.type})
        return line

    async def update_line(
        self,
        session: AsyncSession,
        *,
        line_id: int,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Line:
        """
        Частичное обновление. fields - только переданные клиентом ключи (snake_case).
        """
        unknown = set(fields) - set(_PATCHABLE) - {"status"}
        if unknown:
            raise ValidationError(f"Unknown line fields: {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        if "number" in fields:
            changes["number"] = require_text(fields["number"], "number")
        if "type" in fields:
            changes["type"] = require_text(fields["type"], "type")
        if "location" in fields:
            changes["location"] = str(fields["location"] or "").strip()
        for key in ("establishment_date", "last_checked"):
            if key in fields:
                if fields[key] is None:
                    raise ValidationError(f"{key} cannot be null", details={"field": key})
                changes[key] = fields[key]
        if "in_fault_flow" in fields:
            if fields["in_fault_flow"] is None:
                raise ValidationError("inFaultFlow cannot be null", details={"field": "inFaultFlow"})
            changes["in_fault_flow"] = bool(fields["in_fault_flow"])

        target = parse_line_status(fields["status"]) if "status" in fields else None

        async with transaction(session, op="update_line"):
            line = await self._require_line(session, line_id)
            check_version("Line", line.version, expected_version)

            if "type" in changes:
                await self._require_type(session, changes["type"])
            if "number" in changes and changes["number"] != line.number:
                await self._ensure_number_free(session, subsidiary_id=int(line.subsidiary_id), number=changes["number"])
            if target is not None and target.value != line.status:
                unresolved = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
                check_direct_status(target, unresolved_faults=len(unresolved))
                changes["status"] = target.value

            await self._lines.update_fields(session, line, **changes)

        log.info({"event": "line_updated", "line_id": int(line.id), "fields": sorted(changes)})
        return line

    async def set_status(
        self,
        session: AsyncSession,
        *,
        line_id: int,
        status: Optional[str],
        expected_version: Optional[int] = None,
    ) -> Line:
        """
        Прямая установка статуса службой эксплуатации. Заявки не трогает.
        """
        target = parse_line_status(status)

        async with transaction(session, op="set_line_status"):
            line = await self._require_line(session, line_id)
            check_version("Line", line.version, expected_version)

            unresolved = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
            check_direct_status(target, unresolved_faults=len(unresolved))

            previous = line.status
            await self._lines.update_fields(session, line, status=target.value, last_checked=utcnow())

        log.info(
            {
                "event": "line_status_set",
                "line_id": int(line.id),
                "from": previous,
                "to": line.status,
            }
        )
        return line

    async def toggle_fault_flow(self, session: AsyncSession, *, line_id: int) -> Line:
        async with transaction(session, op="toggle_fault_flow"):
            line = await self._require_line(session, line_id)
            await self._lines.update_fields(session, line, in_fault_flow=not line.in_fault_flow)

        log.info({"event": "line_fault_flow_toggled", "line_id": int(line.id), "in_fault_flow": line.in_fault_flow})
        return line

    async def delete_line(self, session: AsyncSession, *, line_id: int) -> None:
        """
        Удаление линии. Пока по ней есть нерешённые заявки - ConflictError;
        решённые заявки удаляются вместе с линией (ON DELETE CASCADE).
        """
        async with transaction(session, op="delete_line"):
            line = await self._require_line(session, line_id)
            unresolved = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
            if unresolved:
                raise ConflictError(
                    f"Line {line.id} has unresolved faults",
                    details={"unresolved_faults": len(unresolved)},
                )
            await self._lines.delete(session, int(line.id))

        log.info({"event": "line_deleted", "line_id": int(line_id)})

    # --- helpers ---

    async def _require_line(self, session: AsyncSession, line_id: int) -> Line:
        line = await self._lines.get(session, line_id, for_update=True)
        if not line:
            raise NotFoundError(f"Line {line_id} not found")
        return line

    async def _require_type(self, session: AsyncSession, code: str) -> None:
        if not await self._line_types.get_by_code(session, code):
            raise ValidationError(f"Unknown line type '{code}'", details={"field": "type"})

    async def _ensure_number_free(self, session: AsyncSession, *, subsidiary_id: int, number: str) -> None:
        if await self._lines.get_by_number(session, subsidiary_id=subsidiary_id, number=number):
            raise ConflictError(
                f"Line number '{number}' already exists in subsidiary {subsidiary_id}",
                details={"field": "number"},
            )

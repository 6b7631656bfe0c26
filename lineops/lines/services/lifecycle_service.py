# path: lineops/lines/services/lifecycle_service.py
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.config import settings
from lineops.core.exceptions import ConflictError, NotFoundError, ValidationError, require_text
from lineops.core.models import User, UserRole
from lineops.core.models.base import utcnow
from lineops.crud.fault_repository import FaultRepository, IFaultRepository
from lineops.crud.line_repository import ILineRepository, LineRepository
from lineops.crud.subsidiary_repository import ISubsidiaryRepository, SubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.crud.user_repository import IUserRepository, UserRepository
from lineops.lines.models import Fault, FaultStatus, Line, LineStatus
from lineops.lines.services.status_rules import check_version, derive_from_faults, next_line_status


log = get_logger("lines.lifecycle")


class FaultLifecycleService:
    """
    Координатор жизненного цикла заявок о неисправностях.

    Каждый переход (заявление, назначение, решение, confirm-working) - одна транзакция:
    заявка и линия меняются вместе или не меняются вовсе.

    Важно:
    - состояние перечитывается внутри транзакции (FOR UPDATE), а не берётся из того,
      что прислал клиент: у клиента данные могут быть устаревшими на период опроса;
    - Validation/NotFound проверяются до первой записи;
    - expected_version (опционально) защищает от повторного применения при ретраях клиента.
    """

    def __init__(
        self,
        *,
        fault_repo: IFaultRepository | None = None,
        line_repo: ILineRepository | None = None,
        user_repo: IUserRepository | None = None,
        subsidiary_repo: ISubsidiaryRepository | None = None,
    ) -> None:
        self._faults = fault_repo or FaultRepository()
        self._lines = line_repo or LineRepository()
        self._users = user_repo or UserRepository()
        self._subsidiaries = subsidiary_repo or SubsidiaryRepository()

    # --- Чтение ---

    async def list_faults(
        self,
        session: AsyncSession,
        *,
        subsidiary_id: Optional[int] = None,
        line_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Sequence[Fault]:
        if status is not None and status not in {s.value for s in FaultStatus}:
            raise ValidationError(f"Unknown fault status '{status}'", details={"field": "status"})
        return await self._faults.list_faults(session, subsidiary_id=subsidiary_id, line_id=line_id, status=status)

    async def get_fault(self, session: AsyncSession, fault_id: int) -> Fault:
        fault = await self._faults.get(session, fault_id)
        if not fault:
            raise NotFoundError(f"Fault {fault_id} not found")
        return fault

    # --- Заявление о неисправности ---

    async def declare_fault(
        self,
        session: AsyncSession,
        *,
        line_id: Optional[int],
        declared_by: Optional[int],
        symptoms: Optional[str],
        probable_cause: Optional[str],
        subsidiary_id: Optional[int] = None,
    ) -> Fault:
        """
        Создаёт заявку open и переводит линию в faulty (lastChecked=now).
        Если другая заявка по линии уже assigned, линия остаётся maintenance.
        """
        if not line_id:
            raise ValidationError("lineId is required", details={"field": "lineId"})
        if not declared_by:
            raise ValidationError("declaredBy is required", details={"field": "declaredBy"})
        symptoms_text = require_text(symptoms, "symptoms")
        cause_text = require_text(probable_cause, "probableCause")

        async with transaction(session, op="declare_fault"):
            line = await self._require_line(session, line_id, field="lineId")
            await self._require_user(session, declared_by, field="declaredBy")

            if subsidiary_id is not None:
                sub = await self._subsidiaries.get(session, subsidiary_id)
                if not sub:
                    raise NotFoundError(f"Subsidiary {subsidiary_id} not found", field="subsidiaryId")
                if int(subsidiary_id) != int(line.subsidiary_id):
                    raise ValidationError(
                        "subsidiaryId does not match the line's subsidiary",
                        details={"field": "subsidiaryId", "line_subsidiary_id": int(line.subsidiary_id)},
                    )

            if line.status == LineStatus.ARCHIVED.value:
                raise ConflictError(f"Line {line.id} is archived")

            now = utcnow()
            fault = await self._faults.create(
                session,
                line_id=int(line.id),
                subsidiary_id=int(line.subsidiary_id),
                declared_by=int(declared_by),
                declared_at=now,
                symptoms=symptoms_text,
                probable_cause=cause_text,
                status=FaultStatus.OPEN.value,
                assigned_to=None,
                assigned_at=None,
                resolved_at=None,
                feedback=None,
            )
            # новая заявка open; если по линии уже работает техник, линия остаётся maintenance
            unresolved = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
            await self._lines.update_fields(
                session,
                line,
                status=next_line_status(line.status, derive_from_faults(f.status for f in unresolved)).value,
                last_checked=now,
            )

        log.info(
            {
                "event": "fault_declared",
                "fault_id": int(fault.id),
                "line_id": int(line.id),
                "line_status": line.status,
            }
        )
        return fault

    # --- Назначение ---

    async def assign_fault(
        self,
        session: AsyncSession,
        *,
        fault_id: int,
        maintenance_user_id: Optional[int],
        expected_version: Optional[int] = None,
    ) -> Fault:
        """
        open -> assigned, линия -> maintenance.

        Переназначение уже назначенной/решённой заявки запрещено (ConflictError).
        """
        if not maintenance_user_id:
            raise ValidationError("maintenanceUserId is required", details={"field": "maintenanceUserId"})

        async with transaction(session, op="assign_fault"):
            fault = await self._require_fault(session, fault_id)
            user = await self._require_user(session, maintenance_user_id, field="maintenanceUserId")
            if user.role != UserRole.MAINTENANCE.value:
                raise ValidationError(
                    f"User {user.id} is not a maintenance user",
                    details={"field": "maintenanceUserId", "role": user.role},
                )

            check_version("Fault", fault.version, expected_version)
            if fault.status != FaultStatus.OPEN.value:
                raise ConflictError(
                    f"Fault {fault.id} is '{fault.status}', only open faults can be assigned",
                    details={"status": fault.status},
                )

            line = await self._require_line(session, fault.line_id)
            now = utcnow()
            await self._faults.update_fields(
                session,
                fault,
                status=FaultStatus.ASSIGNED.value,
                assigned_to=int(user.id),
                assigned_at=now,
            )
            await self._lines.update_fields(
                session,
                line,
                status=next_line_status(line.status, LineStatus.MAINTENANCE).value,
            )

        log.info(
            {
                "event": "fault_assigned",
                "fault_id": int(fault.id),
                "assigned_to": int(user.id),
                "line_id": int(line.id),
                "line_status": line.status,
            }
        )
        return fault

    # --- Решение ---

    async def resolve_fault(
        self,
        session: AsyncSession,
        *,
        fault_id: int,
        feedback: Optional[str],
        expected_version: Optional[int] = None,
    ) -> Fault:
        """
        open|assigned -> resolved, feedback сохраняется.

        Статус линии пересчитывается по оставшимся нерешённым заявкам
        (working, если их нет). Повторное решение - ConflictError, без перештамповки.
        """
        feedback_text = str(feedback).strip() if feedback is not None else ""

        async with transaction(session, op="resolve_fault"):
            fault = await self._require_fault(session, fault_id)
            check_version("Fault", fault.version, expected_version)
            if fault.status == FaultStatus.RESOLVED.value:
                raise ConflictError(f"Fault {fault.id} is already resolved", details={"status": fault.status})

            line = await self._require_line(session, fault.line_id)
            now = utcnow()
            await self._faults.update_fields(
                session,
                fault,
                status=FaultStatus.RESOLVED.value,
                resolved_at=now,
                # заявка, решённая сразу из open, проходит assigned "в тот же момент"
                assigned_at=fault.assigned_at or now,
                feedback=feedback_text,
            )

            remaining = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
            target = derive_from_faults(f.status for f in remaining)
            await self._lines.update_fields(
                session,
                line,
                status=next_line_status(line.status, target).value,
                last_checked=now,
            )

        log.info(
            {
                "event": "fault_resolved",
                "fault_id": int(fault.id),
                "line_id": int(line.id),
                "line_status": line.status,
                "remaining_unresolved": len(remaining),
            }
        )
        return fault

    async def update_feedback(self, session: AsyncSession, *, fault_id: int, feedback: Optional[str]) -> Fault:
        """Правка текста отзыва - только у решённых заявок, статус не меняется."""
        if feedback is None or not isinstance(feedback, str):
            raise ValidationError("feedback is required", details={"field": "feedback"})

        async with transaction(session, op="update_feedback"):
            fault = await self._require_fault(session, fault_id)
            if fault.status != FaultStatus.RESOLVED.value:
                raise ConflictError(
                    f"Fault {fault.id} is '{fault.status}', feedback can be edited only after resolution",
                    details={"status": fault.status},
                )
            await self._faults.update_fields(session, fault, feedback=feedback)

        log.info({"event": "fault_feedback_updated", "fault_id": int(fault.id)})
        return fault

    # --- Confirm-working ---

    async def confirm_working(self, session: AsyncSession, *, line_id: int) -> tuple[Line, list[Fault]]:
        """
        Оператор подтверждает, что линия исправна.

        Все нерешённые заявки линии закрываются одним UPDATE с фиксированным отзывом,
        линия -> working. Всё в одной транзакции: если что-то упало, линия не останется
        working при открытых заявках. Повторный вызов ничего не закрывает.
        """
        feedback = settings.lifecycle.auto_resolve_feedback

        async with transaction(session, op="confirm_working"):
            line = await self._require_line(session, line_id)
            if line.status == LineStatus.ARCHIVED.value:
                raise ConflictError(f"Line {line.id} is archived")

            unresolved = await self._faults.list_unresolved_for_line(session, line.id, for_update=True)
            fault_ids = [int(f.id) for f in unresolved]
            if not fault_ids and line.status == LineStatus.WORKING.value:
                # повторный вызов: ни линию, ни заявки не трогаем
                log.info({"event": "line_confirmed_working", "line_id": int(line.id), "auto_resolved": 0})
                return line, []

            now = utcnow()
            resolved_count = await self._faults.resolve_many(
                session,
                fault_ids=fault_ids,
                feedback=feedback,
                resolved_at=now,
            )
            if resolved_count != len(fault_ids):
                raise ConflictError(
                    "Faults changed while confirming the line, reload and retry",
                    details={"expected": len(fault_ids), "resolved": resolved_count},
                )

            await self._lines.update_fields(
                session,
                line,
                status=LineStatus.WORKING.value,
                last_checked=now,
            )
            resolved = list(await self._faults.fetch_by_ids(session, fault_ids))

        log.info(
            {
                "event": "line_confirmed_working",
                "line_id": int(line.id),
                "auto_resolved": len(resolved),
            }
        )
        return line, resolved

    # --- helpers ---

    async def _require_line(self, session: AsyncSession, line_id: int, *, field: Optional[str] = None) -> Line:
        line = await self._lines.get(session, line_id, for_update=True)
        if not line:
            raise NotFoundError(f"Line {line_id} not found", field=field)
        return line

    async def _require_fault(self, session: AsyncSession, fault_id: int) -> Fault:
        fault = await self._faults.get(session, fault_id, for_update=True)
        if not fault:
            raise NotFoundError(f"Fault {fault_id} not found")
        return fault

    async def _require_user(self, session: AsyncSession, user_id: int, *, field: str) -> User:
        user = await self._users.get_by_id(session, user_id=user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found", field=field)
        return user


__all__ = ["FaultLifecycleService"]

# path: lineops/lines/services/status_rules.py
"""
Правила статуса линии.

Статус линии производный от заявок:
- есть назначенная (assigned) заявка  -> maintenance
- есть открытая (open) заявка          -> faulty
- нерешённых заявок нет                -> working

derive_from_faults считается по всем нерешённым заявкам линии и при заявлении,
и при решении, поэтому итог не зависит от порядка переходов.

Административные статусы (out_of_service, archived) ставятся только вручную и имеют
приоритет: переходы заявок их не перетирают.
"""
from __future__ import annotations

from typing import Iterable, Optional

from lineops.core.exceptions import ConflictError, ValidationError
from lineops.lines.models.enums import FaultStatus, LineStatus


def parse_line_status(value: object) -> LineStatus:
    try:
        return LineStatus(str(value or "").strip())
    except ValueError:
        allowed = ", ".join(s.value for s in LineStatus)
        raise ValidationError(f"Unknown line status '{value}', expected one of: {allowed}", details={"field": "status"})


def derive_from_faults(fault_statuses: Iterable[str]) -> LineStatus:
    statuses = set(fault_statuses)
    if FaultStatus.ASSIGNED.value in statuses:
        return LineStatus.MAINTENANCE
    if FaultStatus.OPEN.value in statuses:
        return LineStatus.FAULTY
    return LineStatus.WORKING


def next_line_status(current: str, target: LineStatus) -> LineStatus:
    """Статус линии после перехода заявки: административный статус не трогаем."""
    current_status = LineStatus(current)
    if current_status in LineStatus.administrative():
        return current_status
    return target


def check_direct_status(target: LineStatus, *, unresolved_faults: int) -> None:
    """
    Ручная установка статуса службой эксплуатации.

    - faulty/maintenance ставятся только через заявки;
    - working при нерешённых заявках запрещён (для этого есть confirm-working);
    - out_of_service/archived разрешены всегда.
    """
    if target in LineStatus.fault_driven():
        raise ValidationError(
            f"Status '{target.value}' is driven by faults and cannot be set directly",
            details={"field": "status"},
        )
    if target == LineStatus.WORKING and unresolved_faults:
        raise ConflictError(
            "Line has unresolved faults; use confirm-working to close them",
            details={"unresolved_faults": unresolved_faults},
        )


def check_version(entity: str, current: int, expected: Optional[int]) -> None:
    if expected is not None and int(expected) != int(current):
        raise ConflictError(
            f"{entity} was modified (version {current}, expected {expected}), reload and retry",
            details={"version": int(current)},
        )

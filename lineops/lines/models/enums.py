# path: lineops/lines/models/enums.py
from __future__ import annotations

from enum import Enum


class LineStatus(str, Enum):
    """
    Состояние линии.

    Значения:
    - working:         линия исправна
    - faulty:          заявлена неисправность, никто ещё не взял в работу
    - maintenance:     неисправность назначена службе эксплуатации
    - out_of_service:  выведена из эксплуатации вручную (административный статус)
    - archived:        архив (административный статус)
    """

    WORKING = "working"
    FAULTY = "faulty"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"
    ARCHIVED = "archived"

    @classmethod
    def administrative(cls) -> frozenset["LineStatus"]:
        # статусы, которые ставятся только вручную и имеют приоритет над статусом по заявкам
        return frozenset({cls.OUT_OF_SERVICE, cls.ARCHIVED})

    @classmethod
    def fault_driven(cls) -> frozenset["LineStatus"]:
        return frozenset({cls.FAULTY, cls.MAINTENANCE})


class FaultStatus(str, Enum):
    """open -> assigned -> resolved, только вперёд."""

    OPEN = "open"
    ASSIGNED = "assigned"
    RESOLVED = "resolved"


class LineRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def sql_values(enum_cls: type[Enum]) -> str:
    """"'a','b','c'" для CheckConstraint."""
    return ",".join(f"'{e.value}'" for e in enum_cls)

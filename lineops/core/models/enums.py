# path: lineops/core/models/enums.py
from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    Роль пользователя.

    - admin:        заводит линии и запросы на новые линии
    - subsidiary:   пользователь дочернего общества, заявляет неисправности
    - maintenance:  служба эксплуатации, берёт заявки в работу и закрывает их
    """

    ADMIN = "admin"
    SUBSIDIARY = "subsidiary"
    MAINTENANCE = "maintenance"

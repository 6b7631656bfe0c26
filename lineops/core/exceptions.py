# path: lineops/core/exceptions.py
from __future__ import annotations

from typing import Any, Optional


class LineOpsError(Exception):
    """
    Базовая доменная ошибка.

    kind уходит клиенту как машиночитаемый тип ошибки,
    status_code - HTTP-код, который ставит обработчик в main.py.
    """

    kind: str = "error"
    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(LineOpsError):
    """Пустое/некорректное обязательное поле. Обнаруживается до любой записи."""

    kind = "validation"
    status_code = 400


class NotFoundError(LineOpsError):
    """
    Сущность не найдена.

    Если не найдена ссылка из тела запроса (lineId, declaredBy, ...), а не ресурс из пути,
    передаём field=... - тогда это 400, как у остальных ошибок входных данных.
    """

    kind = "not_found"
    status_code = 404

    def __init__(self, message: str, *, field: Optional[str] = None, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, details=details)
        self.field = field
        if field is not None:
            self.status_code = 400
            self.details.setdefault("field", field)


class ConflictError(LineOpsError):
    """Переход из несовместимого/терминального состояния, гонка версий, нарушение уникальности."""

    kind = "conflict"
    status_code = 409


class PersistenceError(LineOpsError):
    """Транзакцию не удалось зафиксировать; всё откатано."""

    kind = "persistence"
    status_code = 500


def require_text(value: Any, field: str) -> str:
    """Обрезает пробелы и проверяет, что строка не пустая."""
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required", details={"field": field})
    return text

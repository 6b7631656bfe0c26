# path: lineops/core/schemas/common.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ORMBaseSchema(BaseModel):
    """
    Базовая схема для ответов из ORM (pydantic v2).

    Наружу ключи уходят в camelCase (lineId, declaredAt, ...),
    внутри и из ORM читаем snake_case.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RequestSchema(BaseModel):
    """
    Базовая схема тел запросов.

    Поля намеренно Optional: пустые/отсутствующие значения проверяет сервис
    и возвращает ValidationError в общем формате ошибок.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

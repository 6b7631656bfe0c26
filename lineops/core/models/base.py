# path: lineops/core/models/base.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from lineops.core.config import settings


class Base(DeclarativeBase):
    """
    Общий declarative Base.

    - naming_convention берём из конфига, чтобы Alembic генерировал стабильные имена констрейнтов;
    - id есть у всех таблиц проекта.
    """
    __abstract__ = True

    metadata = MetaData(naming_convention=settings.db.naming_convention)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


def utcnow() -> datetime:
    """Текущее время в UTC (aware). Все временные метки проекта ставим через неё."""
    return datetime.now(timezone.utc)

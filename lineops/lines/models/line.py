# path: lineops/lines/models/line.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from lineops.core.models.base import Base, utcnow
from lineops.lines.models.enums import LineStatus, sql_values


class Line(Base):
    """
    Таблица lines - телефонная/IP линия дочернего общества.

    Важно:
    - status производный от заявок (faulty/maintenance/working), кроме административных
      out_of_service/archived, которые ставятся вручную;
    - version - счётчик оптимистичной блокировки (SQLAlchemy version_id_col):
      любой UPDATE проверяет, что строку никто не поменял между чтением и записью.
    """

    __tablename__ = "lines"

    number: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("line_types.code", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    subsidiary_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subsidiaries.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")

    establishment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LineStatus.WORKING.value,
        server_default=LineStatus.WORKING.value,
    )
    last_checked: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    in_fault_flow: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("subsidiary_id", "number", name="uq_lines_subsidiary_id_number"),
        CheckConstraint(f"status IN ({sql_values(LineStatus)})", name="status_values"),
    )

# path: lineops/lines/models/fault.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lineops.core.models.base import Base
from lineops.lines.models.enums import FaultStatus, sql_values


class Fault(Base):
    """
    Таблица faults - заявка о неисправности линии.

    Зачем subsidiary_id, если его можно взять через line_id:
    - выборки "заявки дочернего общества" без join;
    - значение фиксируется на момент заявления и сверяется с lines.subsidiary_id при записи.

    Физически заявки не удаляются (кроме каскада при удалении линии без открытых заявок).
    """

    __tablename__ = "faults"

    line_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subsidiary_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subsidiaries.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    declared_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    declared_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    symptoms: Mapped[str] = mapped_column(Text, nullable=False)
    probable_cause: Mapped[str] = mapped_column(Text, nullable=False)

    # open|assigned|resolved
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=FaultStatus.OPEN.value,
        server_default=FaultStatus.OPEN.value,
    )

    assigned_to: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
    )
    assigned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_faults_line_id_status", "line_id", "status"),
        CheckConstraint(f"status IN ({sql_values(FaultStatus)})", name="status_values"),
    )

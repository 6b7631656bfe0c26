# path: lineops/lines/models/line_request.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from lineops.core.models.base import Base, utcnow
from lineops.lines.models.enums import LineRequestStatus, sql_values


class LineRequest(Base):
    """
    Таблица line_requests - запрос администратора на выделение новой линии.

    pending -> approved (создаётся ровно одна линия, line_id указывает на неё)
    pending -> rejected (обязательна причина)
    """

    __tablename__ = "line_requests"

    subsidiary_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subsidiaries.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # код типа, например 'LS', 'IP_STD'
    requested_type: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("line_types.code", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    # заполняет служба эксплуатации при одобрении
    assigned_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    admin_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LineRequestStatus.PENDING.value,
        server_default=LineRequestStatus.PENDING.value,
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    line_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("lines.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_values(LineRequestStatus)})", name="status_values"),
    )

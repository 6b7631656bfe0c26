# path: lineops/lines/models/line_type.py
from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from lineops.core.models.base import Base


class LineType(Base):
    """
    Справочник типов линий (LS, IP_STD, ...).

    Line.type и LineRequest.requested_type ссылаются на code, а не на id:
    код виден пользователю и приходит с фронта.
    """

    __tablename__ = "line_types"

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (UniqueConstraint("code", name="uq_line_types_code"),)

# path: lineops/core/models/user.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class User(Base):
    """
    Пользователь системы (без пароля: аутентификация живёт во внешнем сервисе).
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    # admin | subsidiary | maintenance
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    subsidiary_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("subsidiaries.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin','subsidiary','maintenance')", name="role_values"),
    )

# path: lineops/core/models/subsidiary.py
from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Subsidiary(Base):
    """
    Дочернее общество - владелец набора линий.
    """
    __tablename__ = "subsidiaries"

    name: Mapped[str] = mapped_column(Text, nullable=False)

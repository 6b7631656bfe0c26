# path: lineops/core/schemas/user.py
from __future__ import annotations

from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema


class UserCreate(RequestSchema):
    name: Optional[str] = None
    role: Optional[str] = Field(default=None, examples=["admin", "subsidiary", "maintenance"])
    subsidiary_id: Optional[int] = None


class UserUpdate(RequestSchema):
    name: Optional[str] = None
    role: Optional[str] = None
    subsidiary_id: Optional[int] = None


class UserRead(ORMBaseSchema):
    id: int
    name: str
    role: str
    subsidiary_id: Optional[int] = None

# path: lineops/lines/schemas/line_type.py
from __future__ import annotations

from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema


class LineTypeCreate(RequestSchema):
    code: Optional[str] = Field(default=None, examples=["LS", "IP_STD"])
    title: Optional[str] = Field(default=None, examples=["Ligne spécialisée (LS)"])


class LineTypeUpdate(RequestSchema):
    title: Optional[str] = None


class LineTypeRead(ORMBaseSchema):
    id: int
    code: str
    title: str

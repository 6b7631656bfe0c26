# path: lineops/core/schemas/subsidiary.py
from __future__ import annotations

from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema


class SubsidiaryCreate(RequestSchema):
    name: Optional[str] = Field(default=None, examples=["Filiale Nord"])


class SubsidiaryUpdate(RequestSchema):
    name: Optional[str] = None


class SubsidiaryRead(ORMBaseSchema):
    id: int
    name: str

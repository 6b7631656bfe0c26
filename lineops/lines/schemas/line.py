# path: lineops/lines/schemas/line.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema


class LineCreate(RequestSchema):
    number: Optional[str] = Field(default=None, examples=["LS-3001"])
    type: Optional[str] = Field(default=None, examples=["LS"])
    subsidiary_id: Optional[int] = None
    location: Optional[str] = None
    establishment_date: Optional[datetime] = None
    status: Optional[str] = None
    in_fault_flow: Optional[bool] = None


class LineUpdate(RequestSchema):
    """
    PATCH /lines/{id}: меняются только переданные ключи.
    status проходит те же правила, что и PATCH /lines/{id}/status.
    """
    number: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    establishment_date: Optional[datetime] = None
    last_checked: Optional[datetime] = None
    in_fault_flow: Optional[bool] = None
    status: Optional[str] = None
    expected_version: Optional[int] = None


class LineStatusUpdate(RequestSchema):
    status: Optional[str] = Field(default=None, examples=["out_of_service"])
    expected_version: Optional[int] = None


class LineRead(ORMBaseSchema):
    id: int
    number: str
    type: str
    subsidiary_id: int
    location: str
    establishment_date: datetime
    status: str
    last_checked: datetime
    in_fault_flow: bool
    version: int

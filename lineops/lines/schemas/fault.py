# path: lineops/lines/schemas/fault.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema
from lineops.lines.schemas.line import LineRead


class FaultCreate(RequestSchema):
    line_id: Optional[int] = None
    subsidiary_id: Optional[int] = None
    declared_by: Optional[int] = None
    symptoms: Optional[str] = Field(default=None, examples=["No dial tone"])
    probable_cause: Optional[str] = Field(default=None, examples=["Cable cut"])


class FaultAssign(RequestSchema):
    maintenance_user_id: Optional[int] = None
    expected_version: Optional[int] = None


class FaultResolve(RequestSchema):
    feedback: Optional[str] = None
    expected_version: Optional[int] = None


class FaultFeedbackUpdate(RequestSchema):
    feedback: Optional[str] = None


class FaultRead(ORMBaseSchema):
    id: int
    line_id: int
    subsidiary_id: int
    declared_by: int
    declared_at: datetime
    symptoms: str
    probable_cause: str
    status: str
    assigned_to: Optional[int] = None
    assigned_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    feedback: Optional[str] = None
    version: int


class ConfirmWorkingRead(ORMBaseSchema):
    line: LineRead
    resolved_faults: list[FaultRead]

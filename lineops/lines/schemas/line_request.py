# path: lineops/lines/schemas/line_request.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema
from lineops.lines.schemas.line import LineRead


class LineRequestCreate(RequestSchema):
    requested_type: Optional[str] = Field(default=None, examples=["LS"])
    subsidiary_id: Optional[int] = None
    admin_id: Optional[int] = None


class LineRequestApprove(RequestSchema):
    assigned_number: Optional[str] = Field(default=None, examples=["LS-3001"])


class LineRequestReject(RequestSchema):
    reason: Optional[str] = None


class LineRequestRead(ORMBaseSchema):
    id: int
    subsidiary_id: int
    requested_type: str
    assigned_number: Optional[str] = None
    admin_id: int
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime
    responded_at: Optional[datetime] = None
    line_id: Optional[int] = None


class ApprovalRead(ORMBaseSchema):
    request: LineRequestRead
    line: LineRead

# path: lineops/lines/schemas/report.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from lineops.core.schemas.common import ORMBaseSchema
from lineops.lines.schemas.fault import FaultRead
from lineops.lines.schemas.line import LineRead
from lineops.lines.schemas.line_request import LineRequestRead


class MaintenanceStatsRead(ORMBaseSchema):
    total: int
    open: int
    assigned: int
    resolved: int
    # None, пока нет ни одной решённой заявки
    average_resolution_ms: Optional[int] = None


class SnapshotRead(ORMBaseSchema):
    lines: list[LineRead]
    faults: list[FaultRead]
    line_requests: list[LineRequestRead]
    fetched_at: datetime
    refresh_after_seconds: int

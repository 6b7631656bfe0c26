from __future__ import annotations

from lineops.lines.schemas.fault import (
    ConfirmWorkingRead,
    FaultAssign,
    FaultCreate,
    FaultFeedbackUpdate,
    FaultRead,
    FaultResolve,
)
from lineops.lines.schemas.line import LineCreate, LineRead, LineStatusUpdate, LineUpdate
from lineops.lines.schemas.line_request import (
    ApprovalRead,
    LineRequestApprove,
    LineRequestCreate,
    LineRequestRead,
    LineRequestReject,
)
from lineops.lines.schemas.line_type import LineTypeCreate, LineTypeRead, LineTypeUpdate
from lineops.lines.schemas.report import MaintenanceStatsRead, SnapshotRead

__all__ = [
    "ApprovalRead",
    "ConfirmWorkingRead",
    "FaultAssign",
    "FaultCreate",
    "FaultFeedbackUpdate",
    "FaultRead",
    "FaultResolve",
    "LineCreate",
    "LineRead",
    "LineStatusUpdate",
    "LineUpdate",
    "LineRequestApprove",
    "LineRequestCreate",
    "LineRequestRead",
    "LineRequestReject",
    "LineTypeCreate",
    "LineTypeRead",
    "LineTypeUpdate",
    "MaintenanceStatsRead",
    "SnapshotRead",
]

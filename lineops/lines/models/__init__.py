# path: lineops/lines/models/__init__.py
from __future__ import annotations

from lineops.lines.models.enums import FaultStatus, LineRequestStatus, LineStatus
from lineops.lines.models.line_type import LineType
from lineops.lines.models.line import Line
from lineops.lines.models.fault import Fault
from lineops.lines.models.line_request import LineRequest

__all__ = [
    "FaultStatus",
    "LineRequestStatus",
    "LineStatus",
    "LineType",
    "Line",
    "Fault",
    "LineRequest",
]

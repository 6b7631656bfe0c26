# path: lineops/lines/api/api_v1/__init__.py
from __future__ import annotations

from fastapi import APIRouter

from lineops.core.config import settings
from .by_subsidiary import router as by_subsidiary_router
from .faults import router as faults_router
from .line_requests import router as line_requests_router
from .line_types import router as line_types_router
from .lines import router as lines_router
from .maintenance import router as maintenance_router
from .maintenance import snapshot_router


router = APIRouter()

# /api/<v1>/line-types/...
router.include_router(line_types_router, prefix=settings.api.v1.line_types)
# /api/<v1>/lines/...
router.include_router(lines_router, prefix=settings.api.v1.lines)
# /api/<v1>/faults/...
router.include_router(faults_router, prefix=settings.api.v1.faults)
# /api/<v1>/line-requests/...
router.include_router(line_requests_router, prefix=settings.api.v1.line_requests)
# /api/<v1>/maintenance/stats
router.include_router(maintenance_router, prefix=settings.api.v1.maintenance)
# /api/<v1>/snapshot
router.include_router(snapshot_router)
# /api/<v1>/subsidiaries/{id}/lines, /faults
router.include_router(by_subsidiary_router, prefix=settings.api.v1.subsidiaries)

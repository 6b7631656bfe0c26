# path: lineops/core/api/api_v1/__init__.py
from fastapi import APIRouter

from lineops.core.config import settings
from lineops.lines.api.api_v1 import router as lines_router
from .subsidiaries import router as subsidiaries_router
from .users import router as users_router


router = APIRouter(prefix=settings.api.v1.prefix)

# /api/<v1>/subsidiaries/...
router.include_router(
    subsidiaries_router,
    prefix=settings.api.v1.subsidiaries,
)

# /api/<v1>/users/...
router.include_router(
    users_router,
    prefix=settings.api.v1.users,
)

# линии, заявки, запросы, статистика: префиксы внутри lines_router
router.include_router(lines_router, prefix="")

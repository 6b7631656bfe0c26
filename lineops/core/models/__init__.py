# path: lineops/core/models/__init__.py

__all__ = (
    "db_helper",
    "Base",
    "Subsidiary",
    "User",
    "UserRole",
)

from .db_helper import db_helper
from .base import Base
from .enums import UserRole
from .subsidiary import Subsidiary
from .user import User

# ВАЖНО: модели lineops.lines.models импортируются отдельно (alembic/env.py, manage.py),
# иначе получаем циклический импорт через Base.

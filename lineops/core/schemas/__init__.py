from __future__ import annotations

from lineops.core.schemas.common import ORMBaseSchema, RequestSchema
from lineops.core.schemas.subsidiary import SubsidiaryCreate, SubsidiaryRead, SubsidiaryUpdate
from lineops.core.schemas.user import UserCreate, UserRead, UserUpdate

__all__ = [
    "ORMBaseSchema",
    "RequestSchema",
    "SubsidiaryCreate",
    "SubsidiaryRead",
    "SubsidiaryUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]

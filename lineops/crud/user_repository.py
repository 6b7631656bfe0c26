# path: lineops/crud/user_repository.py
from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.models import User


log = get_logger("repo.user")


class IUserRepository(Protocol):
    async def get_by_id(self, session: AsyncSession, *, user_id: int) -> Optional[User]: ...
    async def list_users(self, session: AsyncSession, *, role: Optional[str] = None) -> Sequence[User]: ...
    async def create_user(
        self,
        session: AsyncSession,
        *,
        name: str,
        role: str,
        subsidiary_id: Optional[int],
    ) -> User: ...
    async def update_user_fields(self, session: AsyncSession, user: User, **fields: Any) -> User: ...
    async def delete_user(self, session: AsyncSession, *, user_id: int) -> None: ...


class UserRepository(IUserRepository):
    """
    Репозиторий пользователей.

    Правило проекта:
    - Все обращения к БД/SQLAlchemy - только здесь (lineops/crud/).
    """

    async def get_by_id(self, session: AsyncSession, *, user_id: int) -> Optional[User]:
        res = await session.execute(select(User).where(User.id == int(user_id)))
        return res.scalar_one_or_none()

    async def list_users(self, session: AsyncSession, *, role: Optional[str] = None) -> Sequence[User]:
        stmt = select(User).order_by(User.id.asc())
        if role:
            stmt = stmt.where(User.role == role)
        res = await session.execute(stmt)
        return list(res.scalars())

    async def create_user(
        self,
        session: AsyncSession,
        *,
        name: str,
        role: str,
        subsidiary_id: Optional[int],
    ) -> User:
        user = User(name=name, role=role, subsidiary_id=subsidiary_id)
        session.add(user)
        await session.flush()
        log.info({"event": "user_created", "user_id": user.id, "role": role})
        return user

    async def update_user_fields(self, session: AsyncSession, user: User, **fields: Any) -> User:
        """
        Универсальное обновление полей User (name/role/subsidiary_id).
        """
        for key, value in fields.items():
            setattr(user, key, value)
        await session.flush()
        return user

    async def delete_user(self, session: AsyncSession, *, user_id: int) -> None:
        await session.execute(delete(User).where(User.id == int(user_id)))

# path: lineops/core/api/api_v1/users.py
from __future__ import annotations

from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.dependencies import get_subsidiary_repository, get_user_repository
from lineops.core.exceptions import NotFoundError, ValidationError, require_text
from lineops.core.models import UserRole
from lineops.core.models.db_helper import db_helper
from lineops.core.schemas.user import UserCreate, UserRead, UserUpdate
from lineops.crud.subsidiary_repository import ISubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.crud.user_repository import IUserRepository


router = APIRouter(tags=["Users"])


def _parse_role(value: Any) -> str:
    try:
        return UserRole(str(value or "").strip()).value
    except ValueError:
        allowed = ", ".join(r.value for r in UserRole)
        raise ValidationError(f"Unknown role '{value}', expected one of: {allowed}", details={"field": "role"})


@router.get("", response_model=list[UserRead])
async def get_users(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
    role: Optional[str] = None,
):
    """
    Список пользователей (опционально по роли, например ?role=maintenance).

    Важно:
    - чтение из БД только через репозиторий;
    - DI отдаёт интерфейс IUserRepository.
    """
    users = await user_repo.list_users(session, role=_parse_role(role) if role else None)
    return list(users)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
    subsidiary_repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    user_create: UserCreate,
):
    name = require_text(user_create.name, "name")
    role = _parse_role(user_create.role)

    async with transaction(session, op="create_user"):
        if user_create.subsidiary_id is not None and not await subsidiary_repo.get(session, user_create.subsidiary_id):
            raise NotFoundError(f"Subsidiary {user_create.subsidiary_id} not found", field="subsidiaryId")
        user = await user_repo.create_user(
            session,
            name=name,
            role=role,
            subsidiary_id=user_create.subsidiary_id,
        )
    return user


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
):
    user = await user_repo.get_by_id(session, user_id=user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
    subsidiary_repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    user_update: UserUpdate,
):
    """
    Частичное обновление: name / role / subsidiaryId (null отвязывает от общества).
    """
    data = user_update.model_dump(exclude_unset=True)
    fields: dict[str, Any] = {}
    if "name" in data:
        fields["name"] = require_text(data["name"], "name")
    if "role" in data:
        fields["role"] = _parse_role(data["role"])

    async with transaction(session, op="update_user"):
        user = await user_repo.get_by_id(session, user_id=user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        if "subsidiary_id" in data:
            sub_id = data["subsidiary_id"]
            if sub_id is not None and not await subsidiary_repo.get(session, sub_id):
                raise NotFoundError(f"Subsidiary {sub_id} not found", field="subsidiaryId")
            fields["subsidiary_id"] = sub_id
        await user_repo.update_user_fields(session, user, **fields)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
) -> Response:
    # пользователя, на которого ссылаются заявки, не удалить: FK RESTRICT -> ConflictError
    async with transaction(session, op="delete_user"):
        if not await user_repo.get_by_id(session, user_id=user_id):
            raise NotFoundError(f"User {user_id} not found")
        await user_repo.delete_user(session, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

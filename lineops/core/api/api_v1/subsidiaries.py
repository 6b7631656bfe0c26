# path: lineops/core/api/api_v1/subsidiaries.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.dependencies import get_subsidiary_repository
from lineops.core.exceptions import ConflictError, NotFoundError, require_text
from lineops.core.models.db_helper import db_helper
from lineops.core.schemas.subsidiary import SubsidiaryCreate, SubsidiaryRead, SubsidiaryUpdate
from lineops.crud.subsidiary_repository import ISubsidiaryRepository
from lineops.crud.transaction import transaction


router = APIRouter(tags=["Subsidiaries"])
log = get_logger("api.subsidiaries")


@router.get("", response_model=list[SubsidiaryRead])
async def list_subsidiaries(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
):
    return list(await repo.list_all(session))


@router.post("", response_model=SubsidiaryRead, status_code=status.HTTP_201_CREATED)
async def create_subsidiary(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    body: SubsidiaryCreate,
):
    name = require_text(body.name, "name")
    async with transaction(session, op="create_subsidiary"):
        sub = await repo.create(session, name=name)
    log.info({"event": "subsidiary_created", "subsidiary_id": int(sub.id)})
    return sub


@router.get("/{subsidiary_id}", response_model=SubsidiaryRead)
async def get_subsidiary(
    subsidiary_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
):
    sub = await repo.get(session, subsidiary_id)
    if not sub:
        raise NotFoundError(f"Subsidiary {subsidiary_id} not found")
    return sub


@router.patch("/{subsidiary_id}", response_model=SubsidiaryRead)
async def rename_subsidiary(
    subsidiary_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
    body: SubsidiaryUpdate,
):
    name = require_text(body.name, "name")
    async with transaction(session, op="rename_subsidiary"):
        sub = await repo.get(session, subsidiary_id)
        if not sub:
            raise NotFoundError(f"Subsidiary {subsidiary_id} not found")
        await repo.rename(session, sub, name=name)
    return sub


@router.delete("/{subsidiary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subsidiary(
    subsidiary_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ISubsidiaryRepository, Depends(get_subsidiary_repository)],
) -> Response:
    """
    Удалить дочернее общество можно, только если на него не ссылаются линии и пользователи.
    """
    async with transaction(session, op="delete_subsidiary"):
        if not await repo.get(session, subsidiary_id):
            raise NotFoundError(f"Subsidiary {subsidiary_id} not found")
        refs = await repo.count_references(session, subsidiary_id)
        if refs:
            raise ConflictError(
                f"Subsidiary {subsidiary_id} is still referenced by lines or users",
                details={"references": refs},
            )
        await repo.delete(session, subsidiary_id)
    log.info({"event": "subsidiary_deleted", "subsidiary_id": int(subsidiary_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)

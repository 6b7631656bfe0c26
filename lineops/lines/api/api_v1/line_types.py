# path: lineops/lines/api/api_v1/line_types.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.dependencies import get_line_type_repository
from lineops.core.exceptions import ConflictError, NotFoundError, require_text
from lineops.core.models.db_helper import db_helper
from lineops.crud.line_type_repository import ILineTypeRepository
from lineops.crud.transaction import transaction
from lineops.lines.schemas.line_type import LineTypeCreate, LineTypeRead, LineTypeUpdate


router = APIRouter(tags=["Line types"])
log = get_logger("api.line_types")


@router.get("", response_model=list[LineTypeRead])
async def list_line_types(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ILineTypeRepository, Depends(get_line_type_repository)],
):
    return list(await repo.list_all(session))


@router.post("", response_model=LineTypeRead, status_code=status.HTTP_201_CREATED)
async def create_line_type(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ILineTypeRepository, Depends(get_line_type_repository)],
    body: LineTypeCreate,
):
    code = require_text(body.code, "code")
    title = require_text(body.title, "title")
    async with transaction(session, op="create_line_type"):
        if await repo.get_by_code(session, code):
            raise ConflictError(f"Line type '{code}' already exists", details={"field": "code"})
        line_type = await repo.create(session, code=code, title=title)
    log.info({"event": "line_type_created", "code": code})
    return line_type


@router.patch("/{line_type_id}", response_model=LineTypeRead)
async def retitle_line_type(
    line_type_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ILineTypeRepository, Depends(get_line_type_repository)],
    body: LineTypeUpdate,
):
    # code не меняем: на него ссылаются линии и запросы
    title = require_text(body.title, "title")
    async with transaction(session, op="retitle_line_type"):
        line_type = await repo.get(session, line_type_id)
        if not line_type:
            raise NotFoundError(f"Line type {line_type_id} not found")
        await repo.retitle(session, line_type, title=title)
    return line_type


@router.delete("/{line_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line_type(
    line_type_id: int,
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    repo: Annotated[ILineTypeRepository, Depends(get_line_type_repository)],
) -> Response:
    async with transaction(session, op="delete_line_type"):
        line_type = await repo.get(session, line_type_id)
        if not line_type:
            raise NotFoundError(f"Line type {line_type_id} not found")
        if await repo.is_in_use(session, line_type.code):
            raise ConflictError(f"Line type '{line_type.code}' is in use")
        await repo.delete(session, line_type_id)
    log.info({"event": "line_type_deleted", "line_type_id": int(line_type_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)

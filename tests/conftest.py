"""Общие фикстуры: SQLite (aiosqlite) во временном файле на каждый тест, сид справочников, ASGI-клиент."""

import os
from types import SimpleNamespace
from typing import AsyncIterator

# до импорта lineops: Settings() читает URL при импорте
os.environ["APP_CONFIG__DB__URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lineops.core.models import Base, UserRole, db_helper
from lineops.core.models.db_helper import DatabaseHelper
import lineops.lines.models  # noqa: F401
from lineops.crud.line_repository import LineRepository
from lineops.crud.line_type_repository import LineTypeRepository
from lineops.crud.subsidiary_repository import SubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.crud.user_repository import UserRepository
from lineops.main import main_app


@pytest_asyncio.fixture
async def db(tmp_path) -> AsyncIterator[DatabaseHelper]:
    helper = DatabaseHelper(url=f"sqlite+aiosqlite:///{tmp_path / 'lineops.db'}")
    async with helper.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield helper
    await helper.dispose()


@pytest_asyncio.fixture
async def session(db: DatabaseHelper) -> AsyncIterator[AsyncSession]:
    async with db.session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def seed(session: AsyncSession) -> SimpleNamespace:
    """
    Два дочерних общества, типы LS/IP_STD, пользователи всех ролей и одна рабочая линия.
    Возвращаем только id: ORM-объекты после rollback в сервисах протухают.
    """
    subs = SubsidiaryRepository()
    users = UserRepository()
    async with transaction(session, op="test_seed"):
        north = await subs.create(session, name="Filiale Nord")
        south = await subs.create(session, name="Usine Sud")
        await LineTypeRepository().create(session, code="LS", title="Ligne spécialisée (LS)")
        await LineTypeRepository().create(session, code="IP_STD", title="IP STD 4 chiffres")
        admin = await users.create_user(session, name="Admin", role=UserRole.ADMIN.value, subsidiary_id=None)
        operator = await users.create_user(
            session, name="Opérateur Nord", role=UserRole.SUBSIDIARY.value, subsidiary_id=int(north.id)
        )
        tech = await users.create_user(session, name="Tech 1", role=UserRole.MAINTENANCE.value, subsidiary_id=None)
        tech2 = await users.create_user(session, name="Tech 2", role=UserRole.MAINTENANCE.value, subsidiary_id=None)
        line = await LineRepository().create(
            session,
            number="LS-1001",
            type="LS",
            subsidiary_id=int(north.id),
            location="Salle serveur A",
            status="working",
            in_fault_flow=True,
        )
    return SimpleNamespace(
        north_id=int(north.id),
        south_id=int(south.id),
        admin_id=int(admin.id),
        operator_id=int(operator.id),
        tech_id=int(tech.id),
        tech2_id=int(tech2.id),
        line_id=int(line.id),
    )


@pytest.fixture
def fetch(session: AsyncSession):
    """Перечитать строку из БД, минуя identity map."""

    async def _fetch(model, obj_id: int):
        return await session.get(model, obj_id, populate_existing=True)

    return _fetch


@pytest_asyncio.fixture
async def client(db: DatabaseHelper) -> AsyncIterator[AsyncClient]:
    main_app.dependency_overrides[db_helper.session_getter] = db.session_getter
    async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as ac:
        yield ac
    main_app.dependency_overrides.clear()

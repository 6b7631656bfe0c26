# path: lineops/manage.py
from __future__ import annotations

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from lineops.app_logging import get_logger
from lineops.core.models import Base, UserRole, db_helper
import lineops.lines.models  # noqa: F401  таблицы линий в Base.metadata
from lineops.crud.line_type_repository import LineTypeRepository
from lineops.crud.subsidiary_repository import SubsidiaryRepository
from lineops.crud.transaction import transaction
from lineops.crud.user_repository import UserRepository
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService

log = get_logger("manage")

SEED_SUBSIDIARIES = ("Siège Social", "Filiale Nord", "Usine Sud")
SEED_LINE_TYPES = (
    ("LS", "Ligne spécialisée (LS)"),
    ("IP_STD", "IP STD 4 chiffres"),
)
# (name, role, индекс дочернего общества или None)
SEED_USERS = (
    ("Administrateur Système", UserRole.ADMIN, None),
    ("Opérateur Siège", UserRole.SUBSIDIARY, 0),
    ("Gestionnaire Filiale Nord", UserRole.SUBSIDIARY, 1),
    ("Équipe Support Technique", UserRole.MAINTENANCE, None),
)
# (number, type, индекс дочернего общества, location, in_fault_flow)
SEED_LINES = (
    ("LS-1024", "LS", 0, "Salle serveur A", True),
    ("1001", "IP_STD", 0, "Réception", True),
    ("LS-9901", "LS", 1, "Bureau d'entrepôt", True),
    ("1002", "IP_STD", 1, "Étage commercial", False),
    ("LS-5500", "LS", 2, "Chaîne de production 1", True),
)


async def _cmd_create_schema() -> None:
    # для локального запуска без alembic (в проде: alembic upgrade head)
    async with db_helper.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info({"event": "create_schema_ok"})
    print("✔ Schema created")


async def _seed(session: AsyncSession) -> bool:
    subsidiary_repo = SubsidiaryRepository()
    if await subsidiary_repo.list_all(session):
        return False

    async with transaction(session, op="seed_catalog"):
        subsidiaries = [await subsidiary_repo.create(session, name=name) for name in SEED_SUBSIDIARIES]
        for code, title in SEED_LINE_TYPES:
            await LineTypeRepository().create(session, code=code, title=title)
        users = [
            await UserRepository().create_user(
                session,
                name=name,
                role=role.value,
                subsidiary_id=int(subsidiaries[idx].id) if idx is not None else None,
            )
            for name, role, idx in SEED_USERS
        ]
    sub_ids = [int(s.id) for s in subsidiaries]
    operator, maintenance = users[1], users[3]

    line_svc = LineService()
    lines = {}
    for number, line_type, idx, location, in_fault_flow in SEED_LINES:
        lines[number] = await line_svc.create_line(
            session,
            number=number,
            line_type=line_type,
            subsidiary_id=sub_ids[idx],
            location=location,
            in_fault_flow=in_fault_flow,
        )

    # статусы faulty/maintenance получаются только через заявки
    lifecycle = FaultLifecycleService()
    await lifecycle.declare_fault(
        session,
        line_id=int(lines["1001"].id),
        declared_by=int(operator.id),
        symptoms="Pas de tonalité",
        probable_cause="Câble endommagé",
    )
    fault = await lifecycle.declare_fault(
        session,
        line_id=int(lines["LS-9901"].id),
        declared_by=int(users[2].id),
        symptoms="Coupures fréquentes",
        probable_cause="Équipement défectueux",
    )
    await lifecycle.assign_fault(session, fault_id=int(fault.id), maintenance_user_id=int(maintenance.id))
    return True


async def _cmd_seed() -> None:
    async with db_helper.session_factory() as session:  # type: AsyncSession
        seeded = await _seed(session)
    if seeded:
        log.info({"event": "seed_ok"})
        print("✔ Demo data seeded")
    else:
        log.info({"event": "seed_skipped", "reason": "data_exists"})
        print("Data already present, seed skipped")


async def _run(*, create_schema: bool, seed: bool) -> None:
    # один event loop на все команды: пул соединений привязан к нему
    try:
        if create_schema:
            await _cmd_create_schema()
        if seed:
            await _cmd_seed()
    finally:
        await db_helper.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="lineops.manage", description="Management commands")
    parser.add_argument("--create-schema", action="store_true", help="Create all tables from ORM metadata")
    parser.add_argument("--seed", action="store_true", help="Seed demo subsidiaries, line types, users and lines")
    args = parser.parse_args(argv)

    if not (args.create_schema or args.seed):
        parser.print_help()
        return
    asyncio.run(_run(create_schema=args.create_schema, seed=args.seed))


if __name__ == "__main__":
    main()

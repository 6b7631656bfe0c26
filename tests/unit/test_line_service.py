"""LineService: CRUD линий, ручной статус, удаление."""

from datetime import datetime, timezone

import pytest

from lineops.core.exceptions import ConflictError, NotFoundError, ValidationError
from lineops.crud.fault_repository import FaultRepository
from lineops.lines.models import Fault, Line
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService


svc = LineService()
lifecycle = FaultLifecycleService()


async def _open_fault(session, seed) -> int:
    fault = await lifecycle.declare_fault(
        session,
        line_id=seed.line_id,
        declared_by=seed.operator_id,
        symptoms="Pas de tonalité",
        probable_cause="Câble endommagé",
    )
    return int(fault.id)


@pytest.mark.asyncio
async def test_create_line_validates_type_against_registry(session, seed):
    with pytest.raises(ValidationError) as exc:
        await svc.create_line(session, number="X-1", line_type="FIBRE", subsidiary_id=seed.north_id)
    assert exc.value.details["field"] == "type"

    line = await svc.create_line(
        session, number="1001", line_type="IP_STD", subsidiary_id=seed.north_id, location=" Réception "
    )
    assert line.type == "IP_STD"
    assert line.location == "Réception"
    assert line.status == "working"
    assert line.in_fault_flow is True


@pytest.mark.asyncio
async def test_create_line_number_unique_per_subsidiary(session, seed):
    with pytest.raises(ConflictError):
        await svc.create_line(session, number="LS-1001", line_type="LS", subsidiary_id=seed.north_id)

    # тот же номер в другом обществе - можно
    other = await svc.create_line(session, number="LS-1001", line_type="LS", subsidiary_id=seed.south_id)
    assert other.subsidiary_id == seed.south_id


@pytest.mark.asyncio
async def test_create_line_rejects_fault_driven_status_and_unknown_subsidiary(session, seed):
    with pytest.raises(ValidationError):
        await svc.create_line(
            session, number="LS-2", line_type="LS", subsidiary_id=seed.north_id, status="faulty"
        )
    with pytest.raises(NotFoundError) as exc:
        await svc.create_line(session, number="LS-2", line_type="LS", subsidiary_id=9999)
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_set_status_precedence(session, seed, fetch):
    with pytest.raises(ValidationError):
        await svc.set_status(session, line_id=seed.line_id, status="maintenance")
    with pytest.raises(ValidationError):
        await svc.set_status(session, line_id=seed.line_id, status="nope")

    await _open_fault(session, seed)
    with pytest.raises(ConflictError):
        await svc.set_status(session, line_id=seed.line_id, status="working")

    await svc.set_status(session, line_id=seed.line_id, status="out_of_service")
    line = await fetch(Line, seed.line_id)
    assert line.status == "out_of_service"
    # заявки ручная установка не трогает
    faults = await FaultRepository().list_faults(session, line_id=seed.line_id)
    assert [f.status for f in faults] == ["open"]


@pytest.mark.asyncio
async def test_set_status_checks_expected_version(session, seed, fetch):
    version = (await fetch(Line, seed.line_id)).version
    with pytest.raises(ConflictError):
        await svc.set_status(session, line_id=seed.line_id, status="archived", expected_version=version + 1)

    line = await svc.set_status(session, line_id=seed.line_id, status="archived", expected_version=version)
    assert line.status == "archived"
    assert line.version == version + 1


@pytest.mark.asyncio
async def test_update_line_patches_only_given_fields(session, seed, fetch):
    checked = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    await svc.update_line(
        session,
        line_id=seed.line_id,
        fields={"location": "Salle B", "last_checked": checked, "in_fault_flow": False},
    )

    line = await fetch(Line, seed.line_id)
    assert line.location == "Salle B"
    assert line.in_fault_flow is False
    assert line.number == "LS-1001"
    assert line.status == "working"


@pytest.mark.asyncio
async def test_update_line_routes_status_through_rules(session, seed, fetch):
    with pytest.raises(ValidationError):
        await svc.update_line(session, line_id=seed.line_id, fields={"status": "faulty"})
    with pytest.raises(ValidationError):
        await svc.update_line(session, line_id=seed.line_id, fields={"type": "FIBRE"})
    with pytest.raises(ValidationError):
        await svc.update_line(session, line_id=seed.line_id, fields={"colour": "red"})

    await svc.update_line(session, line_id=seed.line_id, fields={"status": "out_of_service", "type": "IP_STD"})
    line = await fetch(Line, seed.line_id)
    assert line.status == "out_of_service"
    assert line.type == "IP_STD"


@pytest.mark.asyncio
async def test_toggle_fault_flow(session, seed):
    line = await svc.toggle_fault_flow(session, line_id=seed.line_id)
    assert line.in_fault_flow is False
    line = await svc.toggle_fault_flow(session, line_id=seed.line_id)
    assert line.in_fault_flow is True


@pytest.mark.asyncio
async def test_delete_line_blocked_by_unresolved_faults(session, seed, fetch):
    fault_id = await _open_fault(session, seed)

    with pytest.raises(ConflictError):
        await svc.delete_line(session, line_id=seed.line_id)
    assert await fetch(Line, seed.line_id) is not None

    await lifecycle.resolve_fault(session, fault_id=fault_id, feedback="ok")
    await svc.delete_line(session, line_id=seed.line_id)

    assert await fetch(Line, seed.line_id) is None
    # история заявок уходит вместе с линией
    assert await fetch(Fault, fault_id) is None

    with pytest.raises(NotFoundError):
        await svc.delete_line(session, line_id=seed.line_id)

"""FaultLifecycleService: заявление, назначение, решение, confirm-working."""

import pytest

from lineops.core.exceptions import ConflictError, NotFoundError, ValidationError
from lineops.crud.fault_repository import FaultRepository
from lineops.lines.models import Fault, Line
from lineops.lines.services.lifecycle_service import FaultLifecycleService
from lineops.lines.services.line_service import LineService


svc = FaultLifecycleService()


async def _declare(session, seed, **overrides):
    payload = dict(
        line_id=seed.line_id,
        declared_by=seed.operator_id,
        symptoms="Pas de tonalité",
        probable_cause="Câble endommagé",
    )
    payload.update(overrides)
    fault = await svc.declare_fault(session, **payload)
    # после rollback в следующей операции ORM-объект протухнет, держим только id
    return int(fault.id)


# --- заявление ---


@pytest.mark.asyncio
async def test_declare_fault_opens_fault_and_marks_line_faulty(session, seed, fetch):
    fault_id = await _declare(session, seed, subsidiary_id=seed.north_id)

    fault = await fetch(Fault, fault_id)
    assert fault.status == "open"
    assert fault.subsidiary_id == seed.north_id
    assert fault.declared_by == seed.operator_id
    assert fault.assigned_at is None
    assert fault.resolved_at is None

    line = await fetch(Line, seed.line_id)
    assert line.status == "faulty"
    assert line.version == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["symptoms", "probable_cause"])
async def test_declare_fault_rejects_blank_text_without_writing(session, seed, fetch, field):
    with pytest.raises(ValidationError):
        await _declare(session, seed, **{field: "   "})

    assert await FaultRepository().list_faults(session) == []
    line = await fetch(Line, seed.line_id)
    assert line.status == "working"
    assert line.version == 1


@pytest.mark.asyncio
async def test_declare_fault_unknown_references_are_input_errors(session, seed):
    with pytest.raises(NotFoundError) as exc:
        await _declare(session, seed, line_id=9999)
    assert exc.value.status_code == 400
    assert exc.value.details["field"] == "lineId"

    with pytest.raises(NotFoundError) as exc:
        await _declare(session, seed, declared_by=9999)
    assert exc.value.details["field"] == "declaredBy"


@pytest.mark.asyncio
async def test_declare_fault_subsidiary_must_match_line(session, seed, fetch):
    with pytest.raises(ValidationError):
        await _declare(session, seed, subsidiary_id=seed.south_id)

    assert await FaultRepository().list_faults(session) == []
    assert (await fetch(Line, seed.line_id)).status == "working"


@pytest.mark.asyncio
async def test_declare_fault_on_archived_line_is_conflict(session, seed):
    await LineService().set_status(session, line_id=seed.line_id, status="archived")
    with pytest.raises(ConflictError):
        await _declare(session, seed)


@pytest.mark.asyncio
async def test_declare_fault_keeps_out_of_service_status(session, seed, fetch):
    await LineService().set_status(session, line_id=seed.line_id, status="out_of_service")
    fault_id = await _declare(session, seed)

    assert (await fetch(Fault, fault_id)).status == "open"
    assert (await fetch(Line, seed.line_id)).status == "out_of_service"


# --- назначение и решение ---


@pytest.mark.asyncio
async def test_declare_assign_resolve_round(session, seed, fetch):
    fault_id = await _declare(session, seed)

    await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.tech_id)
    fault = await fetch(Fault, fault_id)
    assert fault.status == "assigned"
    assert fault.assigned_to == seed.tech_id
    assert fault.assigned_at is not None
    assert fault.resolved_at is None
    assert (await fetch(Line, seed.line_id)).status == "maintenance"

    await svc.resolve_fault(session, fault_id=fault_id, feedback="Câble remplacé")
    fault = await fetch(Fault, fault_id)
    assert fault.status == "resolved"
    assert fault.resolved_at is not None
    assert fault.feedback == "Câble remplacé"
    assert (await fetch(Line, seed.line_id)).status == "working"


@pytest.mark.asyncio
async def test_assign_requires_maintenance_user(session, seed, fetch):
    fault_id = await _declare(session, seed)

    with pytest.raises(ValidationError):
        await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.operator_id)
    with pytest.raises(NotFoundError):
        await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=9999)
    with pytest.raises(NotFoundError) as exc:
        await svc.assign_fault(session, fault_id=9999, maintenance_user_id=seed.tech_id)
    assert exc.value.status_code == 404

    assert (await fetch(Fault, fault_id)).status == "open"
    assert (await fetch(Line, seed.line_id)).status == "faulty"


@pytest.mark.asyncio
async def test_reassigning_is_conflict(session, seed, fetch):
    fault_id = await _declare(session, seed)
    await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.tech_id)

    with pytest.raises(ConflictError):
        await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.tech2_id)
    assert (await fetch(Fault, fault_id)).assigned_to == seed.tech_id


@pytest.mark.asyncio
async def test_resolving_twice_is_conflict_and_not_restamped(session, seed, fetch):
    fault_id = await _declare(session, seed)
    await svc.resolve_fault(session, fault_id=fault_id, feedback="ok")
    first = await fetch(Fault, fault_id)
    resolved_at, version = first.resolved_at, first.version

    with pytest.raises(ConflictError):
        await svc.resolve_fault(session, fault_id=fault_id, feedback="again")

    again = await fetch(Fault, fault_id)
    assert again.resolved_at == resolved_at
    assert again.version == version
    assert again.feedback == "ok"


@pytest.mark.asyncio
async def test_resolving_open_fault_stamps_assigned_at(session, seed, fetch):
    fault_id = await _declare(session, seed)
    await svc.resolve_fault(session, fault_id=fault_id, feedback="")

    fault = await fetch(Fault, fault_id)
    assert fault.assigned_at is not None
    assert fault.assigned_at == fault.resolved_at
    assert fault.assigned_to is None


@pytest.mark.asyncio
async def test_line_status_follows_remaining_faults(session, seed, fetch):
    first_id = await _declare(session, seed)
    second_id = await _declare(session, seed, symptoms="Bruit sur la ligne")
    await svc.assign_fault(session, fault_id=first_id, maintenance_user_id=seed.tech_id)
    await svc.assign_fault(session, fault_id=second_id, maintenance_user_id=seed.tech2_id)

    await svc.resolve_fault(session, fault_id=first_id, feedback="ok")
    # вторая заявка ещё в работе
    assert (await fetch(Line, seed.line_id)).status == "maintenance"

    await svc.resolve_fault(session, fault_id=second_id, feedback="ok")
    assert (await fetch(Line, seed.line_id)).status == "working"


@pytest.mark.asyncio
async def test_declaring_next_to_assigned_fault_keeps_line_in_maintenance(session, seed, fetch):
    first_id = await _declare(session, seed)
    await svc.assign_fault(session, fault_id=first_id, maintenance_user_id=seed.tech_id)

    second_id = await _declare(session, seed, symptoms="Bruit sur la ligne")
    assert (await fetch(Fault, second_id)).status == "open"
    # назначенная заявка главнее: тот же вывод, что и при решении
    assert (await fetch(Line, seed.line_id)).status == "maintenance"

    await svc.resolve_fault(session, fault_id=first_id, feedback="ok")
    assert (await fetch(Line, seed.line_id)).status == "faulty"


@pytest.mark.asyncio
async def test_resolving_assigned_fault_with_open_sibling_leaves_line_faulty(session, seed, fetch):
    first_id = await _declare(session, seed)
    await _declare(session, seed, symptoms="Bruit sur la ligne")
    await svc.assign_fault(session, fault_id=first_id, maintenance_user_id=seed.tech_id)

    await svc.resolve_fault(session, fault_id=first_id, feedback="ok")
    assert (await fetch(Line, seed.line_id)).status == "faulty"


@pytest.mark.asyncio
async def test_expected_version_mismatch_is_conflict(session, seed, fetch):
    fault_id = await _declare(session, seed)

    with pytest.raises(ConflictError):
        await svc.assign_fault(
            session, fault_id=fault_id, maintenance_user_id=seed.tech_id, expected_version=42
        )
    assert (await fetch(Fault, fault_id)).status == "open"

    current = (await fetch(Fault, fault_id)).version
    await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.tech_id, expected_version=current)
    assert (await fetch(Fault, fault_id)).status == "assigned"


@pytest.mark.asyncio
async def test_fault_transitions_do_not_override_out_of_service(session, seed, fetch):
    fault_id = await _declare(session, seed)
    await LineService().set_status(session, line_id=seed.line_id, status="out_of_service")

    await svc.assign_fault(session, fault_id=fault_id, maintenance_user_id=seed.tech_id)
    assert (await fetch(Line, seed.line_id)).status == "out_of_service"
    await svc.resolve_fault(session, fault_id=fault_id, feedback="ok")
    assert (await fetch(Line, seed.line_id)).status == "out_of_service"
    assert (await fetch(Fault, fault_id)).status == "resolved"


# --- feedback ---


@pytest.mark.asyncio
async def test_feedback_edit_only_after_resolution(session, seed, fetch):
    fault_id = await _declare(session, seed)
    with pytest.raises(ConflictError):
        await svc.update_feedback(session, fault_id=fault_id, feedback="early")

    await svc.resolve_fault(session, fault_id=fault_id, feedback="first")
    await svc.update_feedback(session, fault_id=fault_id, feedback="corrected")

    fault = await fetch(Fault, fault_id)
    assert fault.feedback == "corrected"
    assert fault.status == "resolved"


# --- confirm-working ---


@pytest.mark.asyncio
async def test_confirm_working_force_resolves_all_faults(session, seed, fetch):
    first_id = await _declare(session, seed)
    second_id = await _declare(session, seed, symptoms="Bruit sur la ligne")
    await svc.assign_fault(session, fault_id=first_id, maintenance_user_id=seed.tech_id)

    line, resolved = await svc.confirm_working(session, line_id=seed.line_id)

    assert line.status == "working"
    assert sorted(f.id for f in resolved) == sorted([first_id, second_id])
    for fault_id in (first_id, second_id):
        fault = await fetch(Fault, fault_id)
        assert fault.status == "resolved"
        assert fault.feedback == "Auto-resolved by check"
        assert fault.resolved_at is not None
        assert fault.assigned_at is not None
    assert (await fetch(Line, seed.line_id)).status == "working"


@pytest.mark.asyncio
async def test_confirm_working_is_idempotent(session, seed, fetch):
    fault_id = await _declare(session, seed)
    await svc.confirm_working(session, line_id=seed.line_id)
    before = await fetch(Fault, fault_id)
    resolved_at, version = before.resolved_at, before.version
    line_before = await fetch(Line, seed.line_id)
    line_state = (line_before.status, line_before.last_checked, line_before.version)

    _, resolved = await svc.confirm_working(session, line_id=seed.line_id)

    assert resolved == []
    after = await fetch(Fault, fault_id)
    assert after.resolved_at == resolved_at
    assert after.version == version
    line = await fetch(Line, seed.line_id)
    # второй вызов ничего не пишет: ни lastChecked, ни version не меняются
    assert (line.status, line.last_checked, line.version) == line_state


@pytest.mark.asyncio
async def test_confirm_working_on_clean_working_line_writes_nothing(session, seed, fetch):
    before = await fetch(Line, seed.line_id)
    state = (before.status, before.last_checked, before.version)

    line, resolved = await svc.confirm_working(session, line_id=seed.line_id)

    assert resolved == []
    assert line.status == "working"
    after = await fetch(Line, seed.line_id)
    assert (after.status, after.last_checked, after.version) == state


@pytest.mark.asyncio
async def test_confirm_working_overrides_out_of_service_but_not_archived(session, seed, fetch):
    await LineService().set_status(session, line_id=seed.line_id, status="out_of_service")
    line, _ = await svc.confirm_working(session, line_id=seed.line_id)
    assert line.status == "working"

    await LineService().set_status(session, line_id=seed.line_id, status="archived")
    with pytest.raises(ConflictError):
        await svc.confirm_working(session, line_id=seed.line_id)
    assert (await fetch(Line, seed.line_id)).status == "archived"


@pytest.mark.asyncio
async def test_confirm_working_unknown_line(session, seed):
    with pytest.raises(NotFoundError) as exc:
        await svc.confirm_working(session, line_id=9999)
    assert exc.value.status_code == 404

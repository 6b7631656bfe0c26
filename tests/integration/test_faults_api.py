"""HTTP: /api/v1/faults и confirm-working, сквозные сценарии."""

import pytest

API = "/api/v1"


async def _declare(client, seed, **overrides) -> dict:
    body = {
        "lineId": seed.line_id,
        "declaredBy": seed.operator_id,
        "symptoms": "Pas de tonalité",
        "probableCause": "Câble endommagé",
    }
    body.update(overrides)
    resp = await client.post(f"{API}/faults", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_declare_assign_resolve_scenario(client, seed):
    fault = await _declare(client, seed, subsidiaryId=seed.north_id)
    assert fault["status"] == "open"
    assert fault["lineId"] == seed.line_id
    assert fault["subsidiaryId"] == seed.north_id
    assert fault["assignedAt"] is None
    assert (await client.get(f"{API}/lines/{seed.line_id}")).json()["status"] == "faulty"

    resp = await client.patch(
        f"{API}/faults/{fault['id']}/assign",
        json={"maintenanceUserId": seed.tech_id, "expectedVersion": fault["version"]},
    )
    assert resp.status_code == 200, resp.text
    assigned = resp.json()
    assert assigned["status"] == "assigned"
    assert assigned["assignedTo"] == seed.tech_id
    assert assigned["assignedAt"] is not None
    assert (await client.get(f"{API}/lines/{seed.line_id}")).json()["status"] == "maintenance"

    resp = await client.patch(f"{API}/faults/{fault['id']}/resolve", json={"feedback": "Câble remplacé"})
    assert resp.status_code == 200, resp.text
    resolved = resp.json()
    assert resolved["status"] == "resolved"
    assert resolved["resolvedAt"] is not None
    assert resolved["feedback"] == "Câble remplacé"
    assert (await client.get(f"{API}/lines/{seed.line_id}")).json()["status"] == "working"

    resp = await client.patch(f"{API}/faults/{fault['id']}/resolve", json={"feedback": "again"})
    assert resp.status_code == 409
    assert resp.json()["kind"] == "conflict"


@pytest.mark.asyncio
async def test_declare_with_blank_symptoms_is_rejected(client, seed):
    resp = await client.post(
        f"{API}/faults",
        json={"lineId": seed.line_id, "declaredBy": seed.operator_id, "symptoms": "", "probableCause": "x"},
    )
    assert resp.status_code == 400
    payload = resp.json()
    assert payload["kind"] == "validation"
    assert payload["error"]

    assert (await client.get(f"{API}/faults")).json() == []
    assert (await client.get(f"{API}/lines/{seed.line_id}")).json()["status"] == "working"


@pytest.mark.asyncio
async def test_declare_with_dangling_reference_is_400(client, seed):
    resp = await client.post(
        f"{API}/faults",
        json={"lineId": 9999, "declaredBy": seed.operator_id, "symptoms": "a", "probableCause": "b"},
    )
    assert resp.status_code == 400
    assert resp.json()["kind"] == "not_found"
    assert resp.json()["details"]["field"] == "lineId"


@pytest.mark.asyncio
async def test_malformed_body_is_validation_error(client, seed):
    resp = await client.post(f"{API}/faults", json={"lineId": "abc"})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "validation"


@pytest.mark.asyncio
async def test_unknown_fault_is_404(client, seed):
    resp = await client.get(f"{API}/faults/9999")
    assert resp.status_code == 404
    assert resp.json()["kind"] == "not_found"

    resp = await client.patch(f"{API}/faults/9999/assign", json={"maintenanceUserId": seed.tech_id})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_stale_expected_version_is_conflict(client, seed):
    fault = await _declare(client, seed)
    resp = await client.patch(
        f"{API}/faults/{fault['id']}/assign",
        json={"maintenanceUserId": seed.tech_id, "expectedVersion": fault["version"] + 5},
    )
    assert resp.status_code == 409
    assert (await client.get(f"{API}/faults/{fault['id']}")).json()["status"] == "open"


@pytest.mark.asyncio
async def test_feedback_edit_after_resolution(client, seed):
    fault = await _declare(client, seed)
    resp = await client.patch(f"{API}/faults/{fault['id']}/feedback", json={"feedback": "trop tôt"})
    assert resp.status_code == 409

    await client.patch(f"{API}/faults/{fault['id']}/resolve", json={"feedback": "v1"})
    resp = await client.patch(f"{API}/faults/{fault['id']}/feedback", json={"feedback": "v2"})
    assert resp.status_code == 200
    assert resp.json()["feedback"] == "v2"
    assert resp.json()["status"] == "resolved"


@pytest.mark.asyncio
async def test_confirm_working_with_two_faults(client, seed):
    first = await _declare(client, seed)
    second = await _declare(client, seed, symptoms="Bruit sur la ligne")
    await client.patch(f"{API}/faults/{first['id']}/assign", json={"maintenanceUserId": seed.tech_id})

    resp = await client.post(f"{API}/lines/{seed.line_id}/confirm-working")
    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["line"]["status"] == "working"
    resolved = {f["id"]: f for f in payload["resolvedFaults"]}
    assert set(resolved) == {first["id"], second["id"]}
    for fault in resolved.values():
        assert fault["status"] == "resolved"
        assert fault["feedback"] == "Auto-resolved by check"
        assert fault["assignedAt"] is not None

    # повторно: ничего не закрывает, заявки не меняются
    before = (await client.get(f"{API}/lines/{seed.line_id}/faults")).json()
    line_before = (await client.get(f"{API}/lines/{seed.line_id}")).json()
    resp = await client.post(f"{API}/lines/{seed.line_id}/confirm-working")
    assert resp.status_code == 200
    assert resp.json()["resolvedFaults"] == []
    assert (await client.get(f"{API}/lines/{seed.line_id}/faults")).json() == before
    assert (await client.get(f"{API}/lines/{seed.line_id}")).json() == line_before


@pytest.mark.asyncio
async def test_fault_filters(client, seed):
    first = await _declare(client, seed)
    await _declare(client, seed)
    await client.patch(f"{API}/faults/{first['id']}/resolve", json={"feedback": "ok"})

    open_faults = (await client.get(f"{API}/faults", params={"status": "open"})).json()
    assert len(open_faults) == 1
    by_sub = (await client.get(f"{API}/subsidiaries/{seed.north_id}/faults")).json()
    assert len(by_sub) == 2
    assert (await client.get(f"{API}/faults", params={"subsidiaryId": seed.south_id})).json() == []
    assert (await client.get(f"{API}/faults", params={"status": "closed"})).status_code == 400

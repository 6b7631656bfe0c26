"""HTTP: /api/v1/line-requests."""

import pytest

API = "/api/v1"


async def _create(client, seed, requested_type="LS") -> dict:
    resp = await client.post(
        f"{API}/line-requests",
        json={"requestedType": requested_type, "subsidiaryId": seed.north_id, "adminId": seed.admin_id},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_approve_creates_line(client, seed):
    req = await _create(client, seed)
    assert req["status"] == "pending"
    assert req["assignedNumber"] is None

    resp = await client.post(f"{API}/line-requests/{req['id']}/approve", json={"assignedNumber": "LS-3001"})
    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["request"]["status"] == "approved"
    assert payload["request"]["assignedNumber"] == "LS-3001"
    assert payload["request"]["respondedAt"] is not None
    assert payload["request"]["lineId"] == payload["line"]["id"]
    assert payload["line"]["number"] == "LS-3001"
    assert payload["line"]["type"] == "LS"
    assert payload["line"]["subsidiaryId"] == seed.north_id
    assert payload["line"]["location"] == "To be updated"
    assert payload["line"]["status"] == "working"

    resp = await client.post(f"{API}/line-requests/{req['id']}/approve", json={"assignedNumber": "LS-3002"})
    assert resp.status_code == 409

    numbers = [x["number"] for x in (await client.get(f"{API}/subsidiaries/{seed.north_id}/lines")).json()]
    assert numbers == ["LS-1001", "LS-3001"]


@pytest.mark.asyncio
async def test_approve_with_taken_number_is_conflict(client, seed):
    req = await _create(client, seed)
    resp = await client.post(f"{API}/line-requests/{req['id']}/approve", json={"assignedNumber": "LS-1001"})
    assert resp.status_code == 409
    assert (await client.get(f"{API}/line-requests/{req['id']}")).json()["status"] == "pending"


@pytest.mark.asyncio
async def test_reject_requires_reason(client, seed):
    req = await _create(client, seed)

    resp = await client.post(f"{API}/line-requests/{req['id']}/reject", json={"reason": ""})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "validation"

    resp = await client.post(f"{API}/line-requests/{req['id']}/reject", json={"reason": "Budget gelé"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"
    assert resp.json()["rejectionReason"] == "Budget gelé"

    resp = await client.post(f"{API}/line-requests/{req['id']}/approve", json={"assignedNumber": "LS-9"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_request_errors(client, seed):
    resp = await client.post(
        f"{API}/line-requests",
        json={"requestedType": "FIBRE", "subsidiaryId": seed.north_id, "adminId": seed.admin_id},
    )
    assert resp.status_code == 400

    resp = await client.post(
        f"{API}/line-requests",
        json={"requestedType": "LS", "subsidiaryId": 9999, "adminId": seed.admin_id},
    )
    assert resp.status_code == 400
    assert resp.json()["details"]["field"] == "subsidiaryId"


@pytest.mark.asyncio
async def test_list_filter_and_delete(client, seed):
    first = await _create(client, seed)
    second = await _create(client, seed, requested_type="IP_STD")
    await client.post(f"{API}/line-requests/{first['id']}/reject", json={"reason": "non"})

    pending = (await client.get(f"{API}/line-requests", params={"status": "pending"})).json()
    assert [r["id"] for r in pending] == [second["id"]]

    resp = await client.delete(f"{API}/line-requests/{first['id']}")
    assert resp.status_code == 204
    assert (await client.get(f"{API}/line-requests/{first['id']}")).status_code == 404
    assert (await client.delete(f"{API}/line-requests/{first['id']}")).status_code == 404

"""
HTTP API tests for presentation sessions and their order.

The router's dependencies fall back to the global SessionLocal, which conftest
points at the per-test database, so no dependency overrides are needed.
"""

import pytest
from fastapi.testclient import TestClient

from presentation_order.web.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def session_id(client):
    response = client.post(
        "/api/presentations",
        json={"start_datetime": "2025-09-05T08:30:00Z", "duration_per_slot": 20},
    )
    assert response.status_code == 201
    return response.json()["session"]["id"]


@pytest.fixture
def slots(client, session_id):
    response = client.put(f"/api/presentations/{session_id}/orders", json={"group_ids": [1, 2, 3]})
    assert response.status_code == 200
    return response.json()["slots"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_get_session_with_order(client, session_id, slots):
    body = client.get(f"/api/presentations/{session_id}").json()
    assert body["session"]["duration_per_slot"] == 20
    assert [s["id"] for s in body["session"]["slots"]] == [s["id"] for s in slots]


def test_unknown_session_is_404(client):
    assert client.get("/api/presentations/999/orders").status_code == 404


def test_generate(client, session_id):
    response = client.post(
        f"/api/presentations/{session_id}/orders/generate",
        json={"group_ids": [7, 8, 9], "algorithm": "sequential"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["session_id"] == session_id
    assert [s["group_id"] for s in body["slots"]] == [7, 8, 9]


def test_generate_bad_algorithm_is_400(client, session_id):
    response = client.post(
        f"/api/presentations/{session_id}/orders/generate",
        json={"group_ids": [1], "algorithm": "by-name"},
    )
    assert response.status_code == 400


def test_insert(client, session_id, slots):
    response = client.post(f"/api/presentations/{session_id}/orders", json={"group_id": 4, "position": 2})
    assert response.status_code == 201
    assert [s["group_id"] for s in response.json()["slots"]] == [1, 4, 2, 3]


def test_move_and_regroup(client, slots):
    response = client.put(f"/api/orders/{slots[2]['id']}", json={"position": 1, "group_id": 30})
    assert response.status_code == 200
    first = response.json()["slots"][0]
    assert first["id"] == slots[2]["id"]
    assert first["group_id"] == 30
    assert first["scheduled_at"] == "2025-09-05T08:30:00Z"


def test_move_out_of_range_is_400(client, slots):
    response = client.put(f"/api/orders/{slots[0]['id']}", json={"position": 4})
    assert response.status_code == 400
    assert "1..3" in response.json()["detail"]


def test_reorder(client, session_id, slots):
    response = client.patch(f"/api/presentations/{session_id}/orders/reorder", json={"from": 3, "to": 1})
    assert response.status_code == 200
    assert [s["group_id"] for s in response.json()["slots"]] == [3, 1, 2]


def test_delete_closes_gap(client, slots):
    response = client.delete(f"/api/orders/{slots[0]['id']}")
    assert response.status_code == 200
    body = response.json()
    assert [s["position"] for s in body["slots"]] == [1, 2]
    assert body["slots"][0]["scheduled_at"] == "2025-09-05T08:30:00Z"


def test_delete_unknown_slot_is_404(client):
    assert client.delete("/api/orders/4242").status_code == 404


def test_patch_session_retimes(client, session_id, slots):
    response = client.patch(
        f"/api/presentations/{session_id}", json={"start_datetime": "2025-09-05T09:00:00Z"}
    )
    assert response.status_code == 200
    listed = client.get(f"/api/presentations/{session_id}/orders").json()
    assert listed["slots"][0]["scheduled_at"] == "2025-09-05T09:00:00Z"
    assert listed["slots"][2]["scheduled_at"] == "2025-09-05T09:40:00Z"


@pytest.mark.parametrize("duration", [24 * 60 + 1, 10**10])
def test_create_rejects_duration_over_a_day(client, duration):
    response = client.post(
        "/api/presentations",
        json={"start_datetime": "2025-09-05T08:30:00Z", "duration_per_slot": duration},
    )
    assert response.status_code == 422


def test_patch_rejects_duration_over_a_day(client, session_id, slots):
    response = client.patch(f"/api/presentations/{session_id}", json={"duration_per_slot": 10**10})
    assert response.status_code == 422
    listed = client.get(f"/api/presentations/{session_id}/orders").json()
    assert listed["slots"][1]["scheduled_at"] == "2025-09-05T08:50:00Z"


def test_slot_time_past_datetime_range_is_400(client):
    created = client.post(
        "/api/presentations",
        json={"start_datetime": "9999-12-31T12:00:00Z", "duration_per_slot": 24 * 60},
    ).json()
    response = client.put(f"/api/presentations/{created['session']['id']}/orders", json={"group_ids": [1, 2]})
    assert response.status_code == 400
    assert "out of range" in response.json()["detail"]

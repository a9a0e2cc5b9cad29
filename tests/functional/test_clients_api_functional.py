"""HTTP contract tests for the clients API, run in-process via TestClient."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from app.logic import repository_clients
from app.models.lane import Lane

A, B, C, D = 1, 2, 3, 4


@pytest.fixture
def board(seed_clients):
    seed_clients(
        [
            (A, Lane.BACKLOG, 1),
            (B, Lane.BACKLOG, 2),
            (C, Lane.BACKLOG, 3),
            (D, Lane.IN_PROGRESS, 1),
        ]
    )


def _by_id(clients):
    return {c["id"]: (c["status"], c["priority"]) for c in clients}


def _stored():
    return {r.id: (r.status, r.priority) for r in repository_clients.list_clients()}


def test_root_greeting(api):
    resp = api.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "SHIPTIVITY API. Read documentation to see API docs"}


def test_create_client_inserts_fields_verbatim(api):
    body = {"id": 10, "name": "Acme", "description": "Rockets", "status": "complete", "priority": 4}
    resp = api.post("/", json=body)
    assert resp.status_code == 201
    assert resp.json() == {"message": "Client created"}
    # No lane normalization on create: priority 4 in an empty lane is kept
    assert api.get("/api/v1/clients/10").json() == body


def test_create_duplicate_id_is_rejected(api, board):
    resp = api.post("/", json={"id": A, "name": "x", "description": "y", "status": "backlog", "priority": 1})
    assert resp.status_code == 400
    assert "UNIQUE" in resp.json()["error"]


@pytest.mark.parametrize(
    "body",
    [
        {"id": 20, "name": "x", "description": "y", "status": "done", "priority": 1},
        {"id": 20, "name": "x", "description": "y", "status": "backlog", "priority": 0},
        {"id": "abc", "name": "x", "description": "y", "status": "backlog", "priority": 1},
        {"id": 20, "name": "x", "description": "y", "status": "backlog", "priority": "top"},
        {"name": "x", "description": "y", "status": "backlog", "priority": 1},
    ],
)
def test_create_rejects_invalid_records(api, body):
    resp = api.post("/", json=body)
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert _stored() == {}


def test_create_reports_store_outage_as_5xx(api, mocker):
    mocker.patch.object(
        repository_clients,
        "insert_client",
        side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
    )
    resp = api.post("/", json={"id": 1, "name": "x", "description": "y", "status": "backlog", "priority": 1})
    assert resp.status_code == 503
    assert resp.json()["code"] == "STORE_UNAVAILABLE"


def test_list_all_clients(api, board):
    resp = api.get("/api/v1/clients")
    assert resp.status_code == 200
    clients = resp.json()
    assert [c["id"] for c in clients] == [A, B, C, D]
    assert set(clients[0]) == {"id", "name", "description", "status", "priority"}


def test_list_filtered_by_lane(api, board):
    resp = api.get("/api/v1/clients", params={"status": "in-progress"})
    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()] == [D]


def test_list_rejects_unknown_lane(api, board):
    resp = api.get("/api/v1/clients", params={"status": "done"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid status provided."
    assert body["long_message"] == "Status can only be one of the following: [backlog | in-progress | complete]."


def test_get_client_by_id(api, board):
    resp = api.get(f"/api/v1/clients/{B}")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": B,
        "name": "Client 2",
        "description": "Description 2",
        "status": "backlog",
        "priority": 2,
    }


@pytest.mark.parametrize(
    "raw_id, long_message",
    [("abc", "Id can only be integer."), ("999", "Cannot find client with that id.")],
)
def test_get_client_invalid_id_returns_single_error(api, board, raw_id, long_message):
    resp = api.get(f"/api/v1/clients/{raw_id}")
    assert resp.status_code == 400
    assert resp.json() == {
        "message": "Invalid id provided.",
        "long_message": long_message,
        "code": "NOT_A_NUMBER" if raw_id == "abc" else "NOT_FOUND",
    }


def test_put_move_to_top_of_lane(api, board):
    resp = api.put(f"/api/v1/clients/{C}", json={"priority": 1})
    assert resp.status_code == 200
    result = _by_id(resp.json())
    assert result[A] == ("backlog", 2)
    assert result[B] == ("backlog", 3)
    assert result[C] == ("backlog", 1)
    assert _stored() == result


def test_put_lane_change_appends_and_renumbers_source(api, board):
    resp = api.put(f"/api/v1/clients/{A}", json={"status": "in-progress"})
    assert resp.status_code == 200
    result = _by_id(resp.json())
    assert result[A] == ("in-progress", 2)
    assert result[B] == ("backlog", 1)
    assert result[C] == ("backlog", 2)
    assert result[D] == ("in-progress", 1)


def test_put_returns_clients_sorted_by_lane_and_priority(api, board):
    resp = api.put(f"/api/v1/clients/{B}", json={"status": "complete"})
    clients = resp.json()
    keys = [(c["status"], c["priority"]) for c in clients]
    assert keys == sorted(keys)


@pytest.mark.parametrize("requested, expected", [(0, 1), (99, 3), ("2", 2)])
def test_put_priority_is_clamped(api, board, requested, expected):
    resp = api.put(f"/api/v1/clients/{B}", json={"priority": requested})
    assert resp.status_code == 200
    assert _by_id(resp.json())[B] == ("backlog", expected)


def test_put_with_empty_body_is_a_noop(api, board):
    before = _stored()
    resp = api.put(f"/api/v1/clients/{A}", json={})
    assert resp.status_code == 200
    assert _by_id(resp.json()) == before


def test_put_unknown_id_mutates_nothing(api, board):
    before = _stored()
    resp = api.put("/api/v1/clients/999", json={"priority": 1, "status": "complete"})
    assert resp.status_code == 400
    assert resp.json()["long_message"] == "Cannot find client with that id."
    assert _stored() == before


def test_put_non_numeric_priority_mutates_nothing(api, board):
    before = _stored()
    resp = api.put(f"/api/v1/clients/{A}", json={"status": "complete", "priority": "high"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid priority provided."
    assert _stored() == before


def test_put_unknown_status_is_rejected(api, board):
    before = _stored()
    resp = api.put(f"/api/v1/clients/{A}", json={"status": "done"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_ENUM"
    assert _stored() == before


def test_repeated_moves_keep_every_lane_contiguous(api, board):
    moves = [
        (A, {"status": "complete"}),
        (D, {"status": "complete", "priority": 1}),
        (B, {"priority": 5}),
        (A, {"status": "backlog", "priority": 1}),
        (C, {"status": "in-progress"}),
    ]
    for client_id, body in moves:
        assert api.put(f"/api/v1/clients/{client_id}", json=body).status_code == 200
    by_lane = {}
    for status, priority in _stored().values():
        by_lane.setdefault(status, []).append(priority)
    for ranks in by_lane.values():
        assert sorted(ranks) == list(range(1, len(ranks) + 1))


def test_request_id_is_echoed_or_generated(api):
    echoed = api.get("/", headers={"X-Request-Id": "req-123"})
    assert echoed.headers["X-Request-Id"] == "req-123"
    generated = api.get("/")
    assert generated.headers["X-Request-Id"]


def test_health_reports_store_state(api, mocker):
    assert api.get("/health").json() == {"status": "ok", "db": True}
    mocker.patch.object(
        repository_clients,
        "ping",
        side_effect=OperationalError("SELECT 1", {}, Exception("unable to open database file")),
    )
    resp = api.get("/health")
    assert resp.status_code == 503
    assert resp.json() == {"status": "degraded", "db": False}


# Ids beyond the signed 64-bit column range cannot exist in the store
HUGE_ID = 99999999999999999999


def test_get_client_out_of_range_id_is_not_found(api, board):
    resp = api.get(f"/api/v1/clients/{HUGE_ID}")
    assert resp.status_code == 400
    assert resp.json() == {
        "message": "Invalid id provided.",
        "long_message": "Cannot find client with that id.",
        "code": "NOT_FOUND",
    }


def test_put_out_of_range_id_mutates_nothing(api, board):
    before = _stored()
    resp = api.put(f"/api/v1/clients/{HUGE_ID}", json={"priority": 1})
    assert resp.status_code == 400
    assert resp.json()["long_message"] == "Cannot find client with that id."
    assert _stored() == before


@pytest.mark.parametrize(
    "body",
    [
        {"id": HUGE_ID, "name": "x", "description": "y", "status": "backlog", "priority": 1},
        {"id": 30, "name": "x", "description": "y", "status": "backlog", "priority": HUGE_ID},
    ],
)
def test_create_out_of_range_integers_are_rejected(api, body):
    resp = api.post("/", json=body)
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert _stored() == {}


@pytest.mark.parametrize("body", [[1], "complete", 3])
def test_put_non_object_body_is_rejected(api, board, body):
    before = _stored()
    resp = api.put(f"/api/v1/clients/{A}", json=body)
    assert resp.status_code == 400
    assert resp.json() == {
        "message": "Invalid body provided.",
        "long_message": "Body must be a JSON object with optional status and priority.",
        "code": "INVALID_BODY",
    }
    assert _stored() == before


def test_put_reports_store_outage_as_5xx(api, board, mocker):
    before = _stored()
    mocker.patch.object(
        repository_clients,
        "update_assignments",
        side_effect=OperationalError("UPDATE clients", {}, Exception("database is locked")),
    )
    resp = api.put(f"/api/v1/clients/{C}", json={"priority": 1})
    assert resp.status_code == 503
    assert resp.json()["code"] == "STORE_UNAVAILABLE"
    assert _stored() == before


def test_get_client_reports_store_outage_as_5xx(api, board, mocker):
    mocker.patch.object(
        repository_clients,
        "get_client",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    )
    resp = api.get(f"/api/v1/clients/{A}")
    assert resp.status_code == 503
    assert resp.json()["code"] == "STORE_UNAVAILABLE"


def test_shutdown_disposes_engine(board):
    from fastapi.testclient import TestClient

    from app.db import base
    from app.main import create_app

    with TestClient(create_app()) as client:
        assert client.get(f"/api/v1/clients/{A}").status_code == 200
        assert base._ENGINE is not None
    assert base._ENGINE is None
    # The next store call rebuilds the engine from configuration
    assert sorted(_stored()) == [A, B, C, D]

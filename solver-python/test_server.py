"""Tests for the Flask API."""

import time

import pytest

import server
from crystal_solver import solve_work


@pytest.fixture
def client():
    server.app.config['TESTING'] = True
    with server.app.test_client() as client:
        yield client


TWO_BY_TWO = {
    "rows": 2,
    "cols": 2,
    "crystals": [
        {"row": 1, "col": 1, "brightness": 5, "right": True},
        {"row": 1, "col": 2, "brightness": 3},
        {"row": 2, "col": 1, "brightness": 4},
        {"row": 2, "col": 2, "brightness": 2},
    ],
}


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_solve_crystal_list(client):
    response = client.post('/solve', json=TWO_BY_TWO)
    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["crystal_count"] == 3
    assert data["total_brightness"] == 11
    assert data["cells"] == [{"row": 2, "col": 2}, {"row": 2, "col": 1}, {"row": 1, "col": 1}]
    assert data["stats"]["configurations"] == 4


def test_solve_text_input(client):
    text = "2 2 4\n1 1 5 0 0 0 0\n1 2 3 0 0 0 0\n2 1 4 0 0 0 0\n2 2 2 0 0 0 0\n"
    response = client.post('/solve', json={"input": text})
    data = response.get_json()
    assert data["crystal_count"] == 4
    assert data["total_brightness"] == 14


def test_solve_empty_box(client):
    response = client.post('/solve', json={"rows": 3, "cols": 3})
    data = response.get_json()
    assert data["success"] is True
    assert data["crystal_count"] == 0
    assert data["total_brightness"] == 0
    assert data["cells"] == []


def test_solve_without_body(client):
    response = client.post('/solve')
    assert response.status_code == 400
    assert response.get_json()["success"] is False


@pytest.mark.parametrize("payload", [
    {"cols": 2},
    {"rows": "2", "cols": 2},
    {"rows": 0, "cols": 2},
    {"rows": 2, "cols": 2, "crystals": {}},
    {"rows": 2, "cols": 2, "crystals": [{"row": 3, "col": 1, "brightness": 1}]},
    {"rows": 2, "cols": 2, "crystals": [{"row": 1, "col": 1, "brightness": -1}]},
    {"rows": 2, "cols": 2, "crystals": [{"row": 1, "col": 1, "brightness": 1, "up": "yes"}]},
    {"rows": 1, "cols": 2, "crystals": [{"row": 1, "col": 1, "brightness": 2 ** 62}]},
    {"input": "1 1 1\n1 1 10000000000000000000 0 0 0 0"},
    {"input": "2 2 1\n1 1"},
    {"input": 42},
])
def test_solve_invalid_payload(client, payload):
    response = client.post('/solve', json=payload)
    assert response.status_code == 400
    data = response.get_json()
    assert data["success"] is False
    assert data["error"].startswith("Invalid input")


def test_solve_rejects_large_table(client, monkeypatch):
    monkeypatch.setattr(server, 'MAX_TABLE_ENTRIES', 100)
    response = client.post('/solve', json={"rows": 2, "cols": 4})
    assert response.status_code == 413
    assert "memo entries" in response.get_json()["error"]


def _full_box(rows, cols):
    return {
        "rows": rows,
        "cols": cols,
        "crystals": [
            {"row": r, "col": c, "brightness": 1}
            for r in range(1, rows + 1) for c in range(1, cols + 1)
        ],
    }


def test_solve_rejects_too_much_work(client):
    # 4x8 fits the memo limit but needs rows * 8^cols = 2^26 candidate checks
    assert solve_work(4, 8) > server.MAX_SOLVE_WORK
    response = client.post('/solve', json={"rows": 4, "cols": 8})
    assert response.status_code == 413
    assert "candidate checks" in response.get_json()["error"]


def test_box_at_work_limit_solves_in_time(client, monkeypatch):
    monkeypatch.setattr(server, 'MAX_SOLVE_WORK', solve_work(4, 7))
    start = time.time()
    response = client.post('/solve', json=_full_box(4, 7))
    elapsed = time.time() - start
    assert response.status_code == 200
    data = response.get_json()
    assert data["crystal_count"] == 28
    assert data["total_brightness"] == 28
    assert elapsed < 60

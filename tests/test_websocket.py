import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from components.core.database import DatabaseManager
from restapi.router import create_app


@pytest.fixture
def live_client(settings):
    app = create_app(DatabaseManager(settings=settings))
    with TestClient(app) as client:
        yield client


def register(client):
    response = client.post("/auth/register", json={"login": "carol", "password": "secret123"})
    return response.json()["access_token"]


def test_account_stream_pushes_snapshots(live_client):
    token = register(live_client)
    headers = {"Authorization": f"Bearer {token}"}

    with live_client.websocket_connect(f"/ws/accounts?token={token}") as ws:
        assert ws.receive_json() == []

        live_client.post("/accounts/", json={"name": "A", "balance": 100}, headers=headers)
        snapshot = ws.receive_json()

    assert [(a["name"], a["balance"]) for a in snapshot] == [("A", 100)]


def test_cost_stream_follows_active_period(live_client):
    token = register(live_client)
    headers = {"Authorization": f"Bearer {token}"}
    account = live_client.post("/accounts/", json={"name": "A"}, headers=headers).json()
    live_client.post("/templates/", json={
        "name": "Rent", "bank_account_id": account["id"], "payment_day": 1,
    }, headers=headers)

    with live_client.websocket_connect(f"/ws/costs?token={token}") as ws:
        assert ws.receive_json() == []

        live_client.post("/periods/", json={"start_date": "2024-03-01T00:00:00"}, headers=headers)
        snapshot = ws.receive_json()

    assert [c["name"] for c in snapshot] == ["Rent"]


def test_unknown_collection_is_refused(live_client):
    token = register(live_client)

    with pytest.raises(WebSocketDisconnect):
        with live_client.websocket_connect(f"/ws/secrets?token={token}") as ws:
            ws.receive_json()


def test_open_stream_holds_no_pooled_connection(live_client):
    token = register(live_client)
    pool = live_client.app.state.db.engine.pool
    assert pool.checkedout() == 0

    with live_client.websocket_connect(f"/ws/accounts?token={token}") as ws:
        assert ws.receive_json() == []
        assert pool.checkedout() == 0

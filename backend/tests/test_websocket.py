import logging

import pytest
from starlette.websockets import WebSocket, WebSocketDisconnect

HEADERS = {"X-Tenant-ID": "tenant-a"}


def test_stream_sends_snapshot_on_connect_and_after_changes(client):
    client.post("/providers/", json={"name": "Telkomsel"})

    with client.websocket_connect("/ws/providers", headers=HEADERS) as websocket:
        first = websocket.receive_json()
        assert first["collection"] == "providers"
        assert [p["name"] for p in first["items"]] == ["Telkomsel"]

        client.post("/providers/", json={"name": "IM3"})

        update = websocket.receive_json()
        assert [p["name"] for p in update["items"]] == ["Telkomsel", "IM3"]


def test_transactions_stream_is_scoped_to_one_ledger(client):
    ledger = client.post("/atm-ledgers/", json={"name": "Shift Pagi"}).json()

    with client.websocket_connect(f"/ws/transactions?ledger_id={ledger['id']}", headers=HEADERS) as websocket:
        assert websocket.receive_json() == {"collection": "transactions", "items": []}


def test_unknown_collection_is_rejected(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/unknown", headers=HEADERS) as websocket:
            websocket.receive_json()


def test_transactions_stream_requires_ledger(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/transactions", headers=HEADERS) as websocket:
            websocket.receive_json()


def test_streamable_collections_are_listed(client):
    collections = client.get("/ws/collections").json()
    assert collections["transactions"] == ["ledger_id"]
    assert collections["providers"] == []


def test_failed_send_closes_the_stream(client, monkeypatch, caplog):
    async def broken_send_json(self, data, mode="text"):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(WebSocket, "send_json", broken_send_json)

    with caplog.at_level(logging.WARNING, logger="realtime"):
        with pytest.raises(WebSocketDisconnect) as closed:
            with client.websocket_connect("/ws/providers", headers=HEADERS) as websocket:
                websocket.receive_json()

    assert closed.value.code == 1011
    assert "Sending 'providers' to tenant tenant-a failed: connection reset" in caplog.text

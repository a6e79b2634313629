from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from expense_tracker.app import create_app
from expense_tracker.errors import PersistenceError
from expense_tracker.services.transactions import MISSING_FIELDS_MESSAGE
from expense_tracker.stores.memory import MemoryEntryStore


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _raise_persistence_error(*args, **kwargs):
    raise PersistenceError("store unreachable")


def test_list_transactions_empty(client: TestClient) -> None:
    response = client.get("/api/transactions")
    assert response.status_code == 200
    assert response.json() == []


def test_create_transaction(client: TestClient) -> None:
    response = client.post(
        "/api/transactions",
        json={"title": "Coffee", "amount": 5, "type": "expense", "category": "food"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Coffee"
    assert data["amount"] == 5
    assert data["type"] == "expense"
    assert data["category"] == "food"
    assert data["id"]
    created_at = _parse_date(data["date"])
    assert abs(datetime.now(timezone.utc) - created_at) < timedelta(minutes=1)


def test_create_transaction_ignores_client_date(client: TestClient) -> None:
    response = client.post(
        "/api/transactions",
        json={
            "title": "Salary",
            "amount": "2500.50",
            "type": "income",
            "category": "work",
            "date": "2001-01-01",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["amount"] == 2500.5
    assert _parse_date(data["date"]).year != 2001


def test_create_transaction_empty_title_rejected(client: TestClient, store: MemoryEntryStore) -> None:
    response = client.post(
        "/api/transactions",
        json={"title": "", "amount": 5, "type": "expense", "category": "food"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": MISSING_FIELDS_MESSAGE}
    assert store.count() == 0


@pytest.mark.parametrize("missing", ["title", "amount", "type", "category"])
def test_create_transaction_missing_field_rejected(
    client: TestClient, store: MemoryEntryStore, missing: str
) -> None:
    payload = {"title": "Bus", "amount": 2, "type": "expense", "category": "transport"}
    del payload[missing]

    response = client.post("/api/transactions", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == MISSING_FIELDS_MESSAGE
    assert store.count() == 0


def test_create_transaction_invalid_amount(client: TestClient, store: MemoryEntryStore) -> None:
    response = client.post(
        "/api/transactions",
        json={"title": "Bus", "amount": "two", "type": "expense", "category": "transport"},
    )
    assert response.status_code == 400
    assert "amount" in response.json()["message"]
    assert store.count() == 0


def test_create_transaction_invalid_type(client: TestClient) -> None:
    response = client.post(
        "/api/transactions",
        json={"title": "Bus", "amount": 2, "type": "transfer", "category": "transport"},
    )
    assert response.status_code == 400
    assert "type" in response.json()["message"]


def test_create_transaction_non_object_body(client: TestClient) -> None:
    response = client.post("/api/transactions", json=["Coffee", 5])
    assert response.status_code == 400
    assert "message" in response.json()


def test_list_transactions_newest_first(client: TestClient) -> None:
    for title in ("first", "second", "third"):
        client.post(
            "/api/transactions",
            json={"title": title, "amount": 1, "type": "expense", "category": "misc"},
        )

    data = client.get("/api/transactions").json()

    assert [tx["title"] for tx in data] == ["third", "second", "first"]
    dates = [_parse_date(tx["date"]) for tx in data]
    assert all(a >= b for a, b in zip(dates, dates[1:]))
    assert len({tx["id"] for tx in data}) == 3


def test_list_transactions_store_failure(client: TestClient, store: MemoryEntryStore, monkeypatch) -> None:
    monkeypatch.setattr(store, "list_all", _raise_persistence_error)

    response = client.get("/api/transactions")

    assert response.status_code == 500
    assert response.json() == {"message": "Error fetching transactions"}


def test_create_transaction_store_failure(client: TestClient, store: MemoryEntryStore, monkeypatch) -> None:
    monkeypatch.setattr(store, "insert", _raise_persistence_error)

    response = client.post(
        "/api/transactions",
        json={"title": "Coffee", "amount": 5, "type": "expense", "category": "food"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "store unreachable"}


def test_server_check(client: TestClient) -> None:
    response = client.get("/test")
    assert response.status_code == 200
    assert response.json() == {"message": "Server is working"}


def test_sample_transaction_and_summary(client: TestClient) -> None:
    response = client.post("/api/transactions/test/transaction")
    assert response.status_code == 200
    sample = response.json()
    assert sample["title"] == "Test Transaction"
    assert sample["amount"] == 100
    assert sample["type"] == "income"
    assert sample["category"] == "test"

    summary = client.get("/api/transactions/test/transactions").json()
    assert summary["count"] == 1
    assert summary["transactions"][0]["id"] == sample["id"]


def test_summary_store_failure(client: TestClient, store: MemoryEntryStore, monkeypatch) -> None:
    monkeypatch.setattr(store, "list_all", _raise_persistence_error)

    response = client.get("/api/transactions/test/transactions")

    assert response.status_code == 500
    assert response.json() == {"error": "store unreachable"}


def test_lifespan_opens_and_closes_store() -> None:
    store = MemoryEntryStore()
    app = create_app(store=store)
    assert not store.is_open

    with TestClient(app):
        assert store.is_open
        assert app.state.transaction_service.store is store

    assert not store.is_open


def test_cors_allows_frontend_origin(client: TestClient) -> None:
    response = client.options(
        "/api/transactions",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_create_transaction_oversized_amount(client: TestClient, store: MemoryEntryStore) -> None:
    response = client.post(
        "/api/transactions",
        json={"title": "Lottery", "amount": 10**400, "type": "income", "category": "luck"},
    )
    assert response.status_code == 400
    assert "amount" in response.json()["message"]
    assert store.count() == 0

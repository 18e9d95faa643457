from __future__ import annotations

import base64
from datetime import date

import pytest
from fastapi.testclient import TestClient

from expense_tracker.config import Settings, get_settings
from expense_tracker.database import get_db
from expense_tracker.expenses import service as expense_service
from expense_tracker.main import app

ALICE = ("alice", "alice-pw")
BOB = ("bob", "bob-pw")

GROCERIES = {"expense": "Groceries", "expenseType": "Food", "expenseAmount": "50.00"}


def add_expense(client, auth=ALICE, **overrides):
    payload = dict(GROCERIES, **overrides)
    response = client.post("/add", json=payload, auth=auth)
    assert response.status_code == 200, response.text
    return response.json()


def test_index_and_health_need_no_auth(client):
    index = client.get("/")
    assert index.status_code == 200
    assert index.json()["status"] == "UP"
    assert index.json()["message"] == "Welcome to Expense Tracker"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "UP"
    assert "timestamp" in health.json()


def test_api_docs_is_public(client):
    response = client.get("/api-docs")
    assert response.status_code == 200
    docs = response.json()
    assert docs["title"] == "Expense Tracker API"
    assert docs["endpoints"]["getByMonth"]["path"] == "/by-month/{yearMonth}"


@pytest.mark.parametrize("method,path", [
    ("get", "/test-auth"),
    ("get", "/all"),
    ("get", "/by-month/2024-03"),
    ("post", "/add"),
    ("put", "/updateExpense"),
    ("delete", "/delete/1"),
])
def test_protected_routes_require_credentials(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "message": "Authentication required"}
    assert response.headers["www-authenticate"] == "Basic"


def test_wrong_password_is_unauthorized(client, alice):
    response = client.get("/all", auth=("alice", "nope"))
    assert response.status_code == 401


def test_test_auth(client, alice):
    response = client.get("/test-auth", auth=ALICE)
    assert response.status_code == 200
    assert response.text == "Authentication successful"


def test_register_returns_user_without_password(client):
    response = client.post("/register", json={"username": "carol", "password": "carol-pw"})

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "carol"
    assert body["role"] == "USER"
    assert "password" not in body

    assert client.get("/test-auth", auth=("carol", "carol-pw")).status_code == 200


def test_register_duplicate_is_conflict(client, alice):
    response = client.post("/register", json={"username": "alice", "password": "x"})

    assert response.status_code == 409
    assert response.json() == {"error": "Username already exists"}
    # original password still works
    assert client.get("/test-auth", auth=ALICE).status_code == 200


def test_register_blank_username_is_bad_request(client):
    response = client.post("/register", json={"username": " ", "password": "x"})
    assert response.status_code == 400
    assert "username" in response.json()["messages"]


def test_login(client, alice):
    ok = client.post("/login", auth=ALICE)
    assert ok.status_code == 200
    assert ok.json() == {"id": alice.id, "username": "alice", "role": "USER"}

    assert client.post("/login", auth=("alice", "bad")).status_code == 401


def test_add_and_list_round_trip(client, alice):
    created = add_expense(client, paymentMethod="cash", date="2024-03-05")

    assert created["id"] > 0
    assert created == {
        "id": created["id"],
        "expense": "Groceries",
        "expenseType": "Food",
        "expenseAmount": "50.00",
        "paymentMethod": "cash",
        "date": "2024-03-05",
    }

    listed = client.get("/all", auth=ALICE).json()
    assert listed == [created]


def test_add_defaults_date_to_today(client, alice):
    created = add_expense(client)
    assert created["date"] == date.today().isoformat()


def test_add_validation_lists_every_field(client, alice):
    response = client.post("/add", json={"expense": "", "paymentMethod": "cash"}, auth=ALICE)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert set(body["messages"]) == {"expense", "expenseType", "expenseAmount"}


def test_add_with_malformed_date_is_bad_request(client, alice):
    response = client.post("/add", json=dict(GROCERIES, date="not-a-date"), auth=ALICE)
    assert response.status_code == 400
    assert "date" in response.json()["messages"]


def test_users_only_see_their_own_expenses(client, alice, bob):
    mine = add_expense(client, auth=ALICE)
    add_expense(client, auth=BOB, expense="Bob's")

    assert [e["id"] for e in client.get("/all", auth=ALICE).json()] == [mine["id"]]


def test_by_month(client, alice, bob):
    for day in ("2024-02-29", "2024-03-01", "2024-03-31", "2024-04-01"):
        add_expense(client, date=day)
    add_expense(client, auth=BOB, date="2024-03-15")

    response = client.get("/by-month/2024-03", auth=ALICE)

    assert response.status_code == 200
    assert sorted(e["date"] for e in response.json()) == ["2024-03-01", "2024-03-31"]


def test_by_month_bad_token(client, alice):
    response = client.get("/by-month/2024-13", auth=ALICE)
    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"


def test_update_own_expense(client, alice, bob):
    created = add_expense(client)

    response = client.put(
        "/updateExpense",
        json={"id": created["id"], "expense": "Market", "expenseType": "Food",
              "expenseAmount": "65.00", "userId": bob.id},
        auth=ALICE,
    )

    assert response.status_code == 200
    assert response.json()["expense"] == "Market"
    # still listed for alice, not moved to bob
    assert [e["expense"] for e in client.get("/all", auth=ALICE).json()] == ["Market"]
    assert client.get("/all", auth=BOB).json() == []


def test_update_someone_elses_expense_is_forbidden(client, alice, bob):
    created = add_expense(client)

    response = client.put("/updateExpense", json=dict(GROCERIES, id=created["id"], expense="Mine now"), auth=BOB)

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"
    assert client.get("/all", auth=ALICE).json()[0]["expense"] == "Groceries"


def test_update_validation(client, alice):
    response = client.put("/updateExpense", json={"expense": "x"}, auth=ALICE)
    assert response.status_code == 400
    assert set(response.json()["messages"]) == {"id", "expenseType", "expenseAmount"}


def test_delete(client, alice, bob):
    created = add_expense(client)

    forbidden = client.delete(f"/delete/{created['id']}", auth=BOB)
    assert forbidden.status_code == 403

    response = client.delete(f"/delete/{created['id']}", auth=ALICE)
    assert response.status_code == 200
    assert response.text == f"Expense with ID {created['id']} deleted successfully"
    assert client.get("/all", auth=ALICE).json() == []


def test_delete_missing_is_forbidden(client, alice):
    response = client.delete("/delete/424242", auth=ALICE)
    assert response.status_code == 403


def test_ownership_agnostic_variant(client, alice, bob):
    add_expense(client, auth=ALICE)
    app.dependency_overrides[get_settings] = lambda: Settings(OWNERSHIP_ENFORCED=False)

    assert len(client.get("/all", auth=BOB).json()) == 1
    assert client.delete("/delete/424242", auth=BOB).status_code == 404


def test_unexpected_error_is_generic_500(db_session, alice, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("connection string leaked: postgres://secret")

    monkeypatch.setattr(expense_service, "list_all", explode)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/all", auth=ALICE)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"
    assert "secret" not in response.text


def test_non_ascii_credentials_authenticate(client):
    registered = client.post("/register", json={"username": "josé", "password": "pässwort"})
    assert registered.status_code == 200

    response = client.get("/test-auth", auth=("josé", "pässwort"))

    assert response.status_code == 200
    assert response.text == "Authentication successful"


@pytest.mark.parametrize("header", [
    "Basic !!!notbase64",
    "Basic " + base64.b64encode(b"no-colon-here").decode("ascii"),
    "Basic " + base64.b64encode(b"\xff\xfe:pw").decode("ascii"),
    "Basic ",
    "Bearer abc.def.ghi",
])
def test_malformed_authorization_header_is_structured_401(client, alice, header):
    response = client.get("/all", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "message": "Authentication required"}
    assert response.headers["www-authenticate"] == "Basic"


def test_password_containing_colon(client):
    client.post("/register", json={"username": "gina", "password": "a:b:c"})
    assert client.get("/test-auth", auth=("gina", "a:b:c")).status_code == 200


def test_long_payment_method_is_accepted(client, alice):
    method = "Corporate card ending 4242 via the travel expense portal"
    created = add_expense(client, paymentMethod=method)
    assert created["paymentMethod"] == method


def test_delete_non_integer_id_reports_id_field(client, alice):
    response = client.delete("/delete/abc", auth=ALICE)

    assert response.status_code == 400
    assert "id" in response.json()["messages"]

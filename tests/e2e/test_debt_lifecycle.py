"""
E2E tests for borrower personas driving the API end to end.

Each persona registers, records debts and pays them down over several
requests, the way the mobile client does.

User personas:
- user_steady: pays each debt in full on time
- user_instalments: pays one loan down in several partial payments
- user_behind: lets a debt slip past its due date, then catches up
- user_household: two members with separate ledgers on one server
"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient


def login(client: TestClient, email: str, password: str = "secret123") -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def add_debt(client: TestClient, headers: dict, amount: float, due_date: date, bank_name: str = "BCP") -> int:
    response = client.post(
        "/api/debts",
        json={
            "bank_name": bank_name,
            "description": f"{bank_name} loan",
            "amount": amount,
            "due_date": due_date.isoformat(),
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


def pay(client: TestClient, headers: dict, debt_id: int, amount: float) -> dict:
    response = client.post(
        "/api/payments",
        json={"debt_id": debt_id, "amount": amount, "payment_date": date.today().isoformat()},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
def test_user_steady_pays_in_full(client: TestClient, register):
    """
    user_steady: one payment per debt, each covering the principal
    Expected: every debt paid, nothing left pending
    """
    register("steady@example.com", name="Steady")
    headers = login(client, "steady@example.com")
    today = date.today()

    first = add_debt(client, headers, 250.00, today)
    second = add_debt(client, headers, 480.50, today + timedelta(days=5), bank_name="BBVA")

    assert pay(client, headers, first, 250.00)["status"] == "paid"
    assert pay(client, headers, second, 480.50)["status"] == "paid"

    stats = client.get("/api/statistics", headers=headers).json()["statistics"]
    assert stats["paid_count"] == 2
    assert stats["pending_count"] == 0
    assert stats["paid_amount"] == 730.50

    for debt_id in (first, second):
        debt = client.get(f"/api/debts/{debt_id}", headers=headers).json()
        assert debt["urgency"] == "normal"
        assert debt["remaining_amount"] == 0


@pytest.mark.integration
def test_user_instalments_partial_payments(client: TestClient, register):
    """
    user_instalments: one loan paid in four instalments
    Expected: pending until the last instalment, history lists all four
    """
    headers = register("instalments@example.com", name="Inés")
    debt_id = add_debt(client, headers, 1000.00, date.today() + timedelta(days=20))

    statuses = [pay(client, headers, debt_id, 250.00)["status"] for _ in range(4)]

    assert statuses == ["pending", "pending", "pending", "paid"]

    history = client.get(f"/api/payments/debt/{debt_id}", headers=headers).json()["payments"]
    assert len(history) == 4
    assert sum(p["amount"] for p in history) == 1000.00

    debt = client.get(f"/api/debts/{debt_id}", headers=headers).json()
    assert debt["paid_amount"] == 1000.00
    assert debt["status"] == "paid"


@pytest.mark.integration
def test_user_behind_catches_up(client: TestClient, register):
    """
    user_behind: a debt ten days past due
    Expected: surfaced as overdue in the default view until paid off
    """
    headers = register("behind@example.com", name="Bruno")
    debt_id = add_debt(client, headers, 300.00, date.today() - timedelta(days=10))

    overdue = client.get("/api/debts?status=overdue", headers=headers).json()["debts"]
    assert [d["id"] for d in overdue] == [debt_id]
    assert overdue[0]["urgency"] == "overdue"

    stats = client.get("/api/statistics", headers=headers).json()["statistics"]
    assert stats["overdue_count"] == 1
    assert stats["overdue_amount"] == 300.00

    pay(client, headers, debt_id, 100.00)
    stats = client.get("/api/statistics", headers=headers).json()["statistics"]
    assert stats["overdue_amount"] == 200.00

    assert pay(client, headers, debt_id, 200.00)["status"] == "paid"

    assert client.get("/api/debts?status=overdue", headers=headers).json()["debts"] == []
    stats = client.get("/api/statistics", headers=headers).json()["statistics"]
    assert stats["overdue_count"] == 0
    assert stats["paid_count"] == 1


@pytest.mark.integration
def test_user_household_ledgers_are_separate(client: TestClient, register):
    """
    user_household: two people on the same server
    Expected: neither can see, pay, edit or delete the other's debts
    """
    maria = register("maria@example.com", name="María")
    jorge = register("jorge@example.com", name="Jorge")
    due = date.today()

    maria_debt = add_debt(client, maria, 600.00, due)
    jorge_debt = add_debt(client, jorge, 90.00, due, bank_name="Interbank")

    assert [d["id"] for d in client.get("/api/debts", headers=maria).json()["debts"]] == [maria_debt]
    assert [d["id"] for d in client.get("/api/debts", headers=jorge).json()["debts"]] == [jorge_debt]

    foreign_payment = client.post(
        "/api/payments",
        json={"debt_id": maria_debt, "amount": 600.00, "payment_date": due.isoformat()},
        headers=jorge,
    )
    assert foreign_payment.status_code == 404
    assert client.delete(f"/api/debts/{maria_debt}", headers=jorge).status_code == 404

    debt = client.get(f"/api/debts/{maria_debt}", headers=maria).json()
    assert debt["paid_amount"] == 0
    assert debt["status"] == "pending"
    assert debt["urgency"] == "due_today"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from academy.app.core.errors import EmailDeliveryError
from academy.app.db.base import Base
from academy.app.db.session import engine
from academy.app.main import app
from academy.app.services.mailer import get_email_client


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


class FakeEmailClient:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    def send(self, to_email, subject, html):
        if to_email in self.failing:
            raise EmailDeliveryError("Email API returned 500")
        self.sent.append((to_email, subject, html))
        return "msg-1"


def register_and_login(client: TestClient, email: str, password: str = "secret") -> str:
    client.post("/auth/register", json={"email": email, "password": password, "full_name": email.split("@")[0].title()})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def payroll_month():
    client = TestClient(app)
    admin = register_and_login(client, "admin@example.com")
    coaches = {}
    for email in ("alice@example.com", "bob@example.com"):
        token = register_and_login(client, email)
        coaches[email] = (token, client.get("/auth/me", headers=auth(token)).json()["id"])
    course = client.post("/courses", json={"name": "Robotics", "hourly_rate": 100}, headers=auth(admin)).json()

    def log(coach_id, session_date, start, end):
        resp = client.post(
            "/sessions",
            json={
                "course_id": course["id"],
                "paid_coach_id": coach_id,
                "session_date": session_date,
                "start_time": start,
                "end_time": end,
            },
            headers=auth(admin),
        )
        assert resp.status_code == 201

    alice_id = coaches["alice@example.com"][1]
    bob_id = coaches["bob@example.com"][1]
    log(alice_id, "2024-03-01", "09:00", "10:30")
    log(alice_id, "2024-03-15", "09:00", "10:00")
    log(alice_id, "2024-04-01", "09:00", "10:00")
    log(bob_id, "2024-03-20", "12:00", "14:00")
    client.post(
        "/adjustments",
        json={"coach_id": alice_id, "month": "2024-03", "type": "bonus", "amount": 50, "notes": "Extra class"},
        headers=auth(admin),
    )
    client.post(
        "/adjustments",
        json={"coach_id": alice_id, "month": "2024-03", "type": "discount", "amount": 20, "notes": "Late"},
        headers=auth(admin),
    )
    return client, admin, coaches


def test_monthly_totals_fold_in_adjustments(payroll_month):
    client, admin, coaches = payroll_month
    rows = client.get("/payroll/monthly?month=2024-03", headers=auth(admin)).json()
    by_name = {row["coach_name"]: row for row in rows}

    alice = by_name["Alice"]
    assert alice["session_count"] == 2
    assert Decimal(alice["total_hours"]) == Decimal("2.5")
    assert Decimal(alice["gross_total"]) == Decimal("250.00")
    assert Decimal(alice["total_bonuses"]) == Decimal("50.00")
    assert Decimal(alice["total_discounts"]) == Decimal("20.00")
    assert Decimal(alice["net_total"]) == Decimal("280.00")

    bob = by_name["Bob"]
    assert Decimal(bob["net_total"]) == Decimal("200.00")


def test_coach_sees_only_own_totals(payroll_month):
    client, _, coaches = payroll_month
    token, _ = coaches["bob@example.com"]
    rows = client.get("/payroll/monthly?month=2024-03", headers=auth(token)).json()
    assert [row["coach_name"] for row in rows] == ["Bob"]


def test_invalid_month(payroll_month):
    client, admin, _ = payroll_month
    assert client.get("/payroll/monthly?month=2024-3", headers=auth(admin)).status_code == 400
    resp = client.post("/admin/invoices/send", json={"month": "March"}, headers=auth(admin))
    assert resp.status_code == 400


def test_send_invoices_reports_each_coach(payroll_month):
    client, admin, _ = payroll_month
    fake = FakeEmailClient(failing={"bob@example.com"})
    app.dependency_overrides[get_email_client] = lambda: fake

    resp = client.post("/admin/invoices/send", json={"month": "2024-03"}, headers=auth(admin))
    assert resp.status_code == 200
    results = {item["email"]: item["status"] for item in resp.json()["emails_sent"]}
    assert results["alice@example.com"] == "sent"
    assert results["bob@example.com"].startswith("failed")

    assert len(fake.sent) == 1
    to_email, subject, html = fake.sent[0]
    assert to_email == "alice@example.com"
    assert "March 2024" in subject
    assert "$280.00" in html
    assert "Extra class" in html


def test_send_invoices_for_month_without_sessions(payroll_month):
    client, admin, _ = payroll_month
    app.dependency_overrides[get_email_client] = lambda: FakeEmailClient()
    resp = client.post("/admin/invoices/send", json={"month": "2023-01"}, headers=auth(admin))
    assert resp.status_code == 200
    assert resp.json() == {"message": "No data found for this month", "emails_sent": []}


def test_send_invoices_requires_admin(payroll_month):
    client, _, coaches = payroll_month
    token, _ = coaches["alice@example.com"]
    app.dependency_overrides[get_email_client] = lambda: FakeEmailClient()
    resp = client.post("/admin/invoices/send", json={"month": "2024-03"}, headers=auth(token))
    assert resp.status_code == 403

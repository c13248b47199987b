"""
HTTP tests for the portal endpoints.

Run with: pytest tests/test_api.py -v
"""
from datetime import datetime, timezone
from decimal import Decimal

from tests.conftest import TEST_PASSWORD


def _login(client, email, role, subrole=None):
    response = client.post(
        "/api/auth/login",
        json={"email": email, "password": TEST_PASSWORD, "role": role, "subrole": subrole},
    )
    assert response.status_code == 200, response.text
    return response.json()["user"]


def _create_request(client, **overrides):
    payload = {
        "tool_name": "Figma",
        "vendor_name": "Figma Inc",
        "purpose": "Design reviews",
        "cost": "1200.00",
        "duration_months": 12,
    }
    payload.update(overrides)
    return client.post("/api/subscriptions", json=payload)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestLogin:
    def test_login_and_me(self, client):
        user = _login(client, "emp@example.com", "employee")
        assert user["role"] == "employee"
        assert user["department"] == "Engineering"

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "emp@example.com"

    def test_wrong_password(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "emp@example.com", "password": "nope", "role": "employee"},
        )
        assert response.status_code == 401

    def test_portal_mismatch_is_denied(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "emp@example.com", "password": TEST_PASSWORD, "role": "hod"},
        )
        assert response.status_code == 403

    def test_finance_subrole_must_match(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "apa@example.com", "password": TEST_PASSWORD, "role": "finance", "subrole": "am"},
        )
        assert response.status_code == 403

    def test_requires_session(self, client):
        assert client.get("/api/subscriptions/mine").status_code == 401

    def test_logout(self, client):
        _login(client, "emp@example.com", "employee")
        assert client.post("/api/auth/logout").status_code == 200
        assert client.get("/api/auth/me").status_code == 401


class TestWorkflow:
    def test_request_to_active(self, client):
        _login(client, "emp@example.com", "employee")
        created = _create_request(client)
        assert created.status_code == 201, created.text
        subscription = created.json()
        assert subscription["status"] == "Pending"
        assert subscription["effective_status"] == "Pending"
        assert Decimal(subscription["cost"]) == Decimal("1200.00")
        sub_id = subscription["id"]

        _login(client, "hod@example.com", "hod")
        pending = client.get("/api/hod/pending").json()
        assert [s["id"] for s in pending] == [sub_id]
        approved = client.post(f"/api/hod/subscriptions/{sub_id}/approve")
        assert approved.status_code == 200
        assert approved.json()["status"] == "Approved by HOD"

        _login(client, "apa@example.com", "finance", "apa")
        assert [s["id"] for s in client.get("/api/finance/queue").json()] == [sub_id]
        assert client.post(f"/api/finance/subscriptions/{sub_id}/approve").json()["status"] == "Approved by APA"

        _login(client, "am@example.com", "finance", "am")
        paid_at = datetime.now(timezone.utc).replace(microsecond=0)
        paid = client.post(
            f"/api/finance/subscriptions/{sub_id}/pay",
            json={"mode": "Bank Transfer", "transaction_id": "NEFT-1", "payment_date": paid_at.isoformat()},
        )
        assert paid.status_code == 200, paid.text
        body = paid.json()
        assert body["status"] == "Active"
        assert body["effective_status"] == "Active"
        assert body["payment_mode"] == "Bank Transfer"
        assert body["expiry_date"].startswith(str(paid_at.year + 1))
        assert body["is_renewable"] is False

        history = client.get("/api/finance/history", params={"kind": "active"}).json()
        assert [s["id"] for s in history] == [sub_id]

        _login(client, "emp@example.com", "employee")
        mine = client.get("/api/subscriptions/mine").json()
        assert [s["status"] for s in mine] == ["Active"]
        kinds = [n["kind"] for n in client.get("/api/notifications").json()]
        assert "paid" in kinds

    def test_decline_with_reason(self, client):
        _login(client, "emp@example.com", "employee")
        sub_id = _create_request(client).json()["id"]

        _login(client, "hod@example.com", "hod")
        declined = client.post(f"/api/hod/subscriptions/{sub_id}/decline", json={"reason": "Budget"})
        assert declined.status_code == 200
        assert declined.json()["remarks"] == "Declined by HOD: Budget"

        again = client.post(f"/api/hod/subscriptions/{sub_id}/approve")
        assert again.status_code == 409

    def test_empty_decline_reason(self, client):
        _login(client, "emp@example.com", "employee")
        sub_id = _create_request(client).json()["id"]

        _login(client, "hod@example.com", "hod")
        response = client.post(f"/api/hod/subscriptions/{sub_id}/decline", json={"reason": ""})
        assert response.status_code == 422
        assert client.get(f"/api/subscriptions/{sub_id}").json()["status"] == "Pending"

    def test_invalid_cost(self, client):
        _login(client, "emp@example.com", "employee")
        assert _create_request(client, cost="0").status_code == 422

    def test_other_department_hod_is_forbidden(self, client):
        _login(client, "emp@example.com", "employee")
        sub_id = _create_request(client).json()["id"]

        _login(client, "mkt-hod@example.com", "hod")
        assert client.post(f"/api/hod/subscriptions/{sub_id}/approve").status_code == 403
        assert client.get(f"/api/subscriptions/{sub_id}").status_code == 403

    def test_finance_cannot_submit(self, client):
        _login(client, "apa@example.com", "finance", "apa")
        assert _create_request(client).status_code == 403

    def test_missing_subscription(self, client):
        _login(client, "admin@example.com", "admin")
        assert client.get("/api/subscriptions/999").status_code == 404


class TestAdmin:
    def test_history_and_listing(self, client):
        _login(client, "emp@example.com", "employee")
        sub_id = _create_request(client).json()["id"]
        _login(client, "hod@example.com", "hod")
        client.post(f"/api/hod/subscriptions/{sub_id}/approve")

        _login(client, "admin@example.com", "admin")
        listing = client.get("/api/admin/subscriptions", params={"department": "Engineering"})
        assert [s["id"] for s in listing.json()] == [sub_id]

        history = client.get(f"/api/admin/subscriptions/{sub_id}/history").json()
        assert [(h["action_type"], h["to_status"]) for h in history] == [
            ("submit", "Pending"),
            ("hod_approve", "Approved by HOD"),
        ]

    def test_create_and_update_user(self, client):
        _login(client, "admin@example.com", "admin")
        created = client.post(
            "/api/admin/users",
            json={"email": "new@example.com", "password": "abcdef", "role": "finance", "department": "Finance"},
        )
        assert created.status_code == 201, created.text
        assert created.json()["subrole"] == "apa"

        updated = client.patch(f"/api/admin/users/{created.json()['id']}", json={"subrole": "am"})
        assert updated.status_code == 200
        assert updated.json()["subrole"] == "am"

        duplicate = client.post(
            "/api/admin/users",
            json={"email": "new@example.com", "password": "abcdef", "role": "employee", "department": "Finance"},
        )
        assert duplicate.status_code == 422

    def test_non_admin_is_forbidden(self, client):
        _login(client, "emp@example.com", "employee")
        assert client.get("/api/admin/users").status_code == 403

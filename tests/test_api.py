"""HTTP surface: auth, status codes and structured error bodies."""
from coinhub.core.config import settings

PASSWORD = "secret123"

API = "/api/v1"


class TestAuth:
    async def test_login_and_me(self, client, make_user):
        user = await make_user(balance=42)

        r = await client.post(f"{API}/auth/login", json={"email": user.email, "password": PASSWORD})
        assert r.status_code == 200
        token = r.json()["access_token"]

        r = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        body = r.json()
        assert body["id"] == user.id
        assert body["balance"] == 42
        assert body["role"] == "user"

    async def test_login_wrong_password(self, client, make_user):
        user = await make_user()

        r = await client.post(f"{API}/auth/login", json={"email": user.email, "password": "nope"})

        assert r.status_code == 401
        assert r.json()["code"] == "unauthenticated"

    async def test_missing_token(self, client):
        r = await client.get(f"{API}/coins/summary")

        assert r.status_code == 401
        assert r.json()["code"] == "unauthenticated"

    async def test_garbage_token(self, client):
        r = await client.get(f"{API}/coins/summary", headers={"Authorization": "Bearer not-a-jwt"})

        assert r.status_code == 401

    async def test_non_admin_forbidden(self, client, make_user, auth_headers):
        user = await make_user(balance=10)

        r = await client.post(
            f"{API}/admin/coins/credit",
            json={"target_user_id": user.id, "amount": 5},
            headers=auth_headers(user),
        )

        assert r.status_code == 403
        assert r.json()["code"] == "unauthorized"


class TestCoinsApi:
    async def test_spend_and_history(self, client, make_user, auth_headers):
        user = await make_user(balance=300)
        h = auth_headers(user)

        r = await client.post(f"{API}/coins/spend", json={"amount": 120, "description": "Voucher"}, headers=h)
        assert r.status_code == 201
        body = r.json()
        assert body["new_balance"] == 180
        assert body["transaction"]["amount"] == -120
        assert body["transaction"]["kind"] == "spend"
        assert body["transaction"]["reference_number"].startswith("COIN-")

        r = await client.get(f"{API}/coins/transactions", headers=h)
        assert r.status_code == 200
        page = r.json()
        assert page["total"] == 1
        assert page["current_balance"] == 180

        r = await client.get(f"{API}/coins/summary", headers=h)
        assert r.json() == {"current_balance": 180, "total_credited": 0, "total_debited": 120}

    async def test_spend_insufficient(self, client, make_user, auth_headers):
        user = await make_user(balance=200)

        r = await client.post(f"{API}/coins/spend", json={"amount": 300}, headers=auth_headers(user))

        assert r.status_code == 400
        body = r.json()
        assert body["code"] == "insufficient_balance"
        assert body["current_balance"] == 200

    async def test_spend_validation(self, client, make_user, auth_headers):
        user = await make_user(balance=200)

        r = await client.post(f"{API}/coins/spend", json={"amount": 0}, headers=auth_headers(user))

        assert r.status_code == 400
        assert r.json()["code"] == "validation_error"


class TestTopupApi:
    async def test_submit_approve_flow(self, client, make_user, auth_headers):
        user = await make_user(balance=500)
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/coins/topup-requests",
            json={"amount": 1000, "receipt_image_ref": "uploads/receipt-1.jpg", "display_name": "mali"},
            headers=auth_headers(user),
        )
        assert r.status_code == 201
        req = r.json()
        assert req["status"] == "pending"

        r = await client.get(f"{API}/admin/topup-requests?status=pending", headers=auth_headers(admin))
        assert r.status_code == 200
        listing = r.json()
        assert listing["total"] == 1
        assert listing["items"][0]["user"]["id"] == user.id

        r = await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))
        notes = r.json()
        assert notes["unread_count"] == 1
        assert notes["items"][0]["payload"]["kind"] == "topup_request"
        assert notes["items"][0]["payload"]["topup_request_id"] == req["id"]

        r = await client.post(
            f"{API}/admin/topup-requests/{req['id']}/process",
            json={"action": "approve"},
            headers=auth_headers(admin),
        )
        assert r.status_code == 200
        result = r.json()
        assert result["request"]["status"] == "approved"
        assert result["request"]["reviewer_id"] == admin.id
        assert result["new_balance"] == 1500
        assert result["transaction"]["balance_after"] == 1500

        r = await client.post(
            f"{API}/admin/topup-requests/{req['id']}/process",
            json={"action": "approve"},
            headers=auth_headers(admin),
        )
        assert r.status_code == 400
        assert r.json()["code"] == "invalid_state"

        r = await client.get(f"{API}/coins/topup-requests", headers=auth_headers(user))
        assert r.json()["items"][0]["status"] == "approved"

    async def test_process_unknown_request(self, client, make_user, auth_headers):
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/topup-requests/999/process",
            json={"action": "reject"},
            headers=auth_headers(admin),
        )

        assert r.status_code == 404
        assert r.json()["code"] == "not_found"

    async def test_process_bad_action(self, client, make_user, auth_headers):
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/topup-requests/1/process",
            json={"action": "maybe"},
            headers=auth_headers(admin),
        )

        assert r.status_code == 400


class TestAdminApi:
    async def test_admin_debit_reports_balance(self, client, make_user, auth_headers):
        user = await make_user(balance=40)
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/coins/debit",
            json={"target_user_id": user.id, "amount": 50},
            headers=auth_headers(admin),
        )

        assert r.status_code == 400
        assert r.json()["current_balance"] == 40
        assert "40" in r.json()["detail"]

    async def test_admin_credit_returns_target_summary(self, client, make_user, auth_headers):
        user = await make_user(balance=40, first_name="Niran")
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/coins/credit",
            json={"target_user_id": user.id, "amount": 60, "description": "Promo"},
            headers=auth_headers(admin),
        )

        assert r.status_code == 201
        body = r.json()
        assert body["new_balance"] == 100
        assert body["transaction"]["kind"] == "topup"
        assert body["target_user"]["first_name"] == "Niran"
        assert body["target_user"]["balance"] == 100

    async def test_mark_notifications_read(self, client, make_user, auth_headers):
        user = await make_user(balance=100)
        admin = await make_user(role="admin")
        for _ in range(2):
            await client.post(f"{API}/coins/spend", json={"amount": 10}, headers=auth_headers(user))

        r = await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))
        first_id = r.json()["items"][0]["id"]

        r = await client.patch(f"{API}/admin/notifications/{first_id}/read", headers=auth_headers(admin))
        assert r.status_code == 200
        assert r.json()["is_read"] is True

        r = await client.patch(f"{API}/admin/notifications/read-all", headers=auth_headers(admin))
        assert r.json() == {"ok": True, "updated": 1}


async def test_health(client):
    r = await client.get("/health")

    assert r.status_code == 200
    assert r.json()["db_ok"] is True


class TestAmountLimits:
    async def test_topup_above_max_amount(self, client, make_user, auth_headers):
        user = await make_user()

        r = await client.post(
            f"{API}/coins/topup-requests",
            json={"amount": 10**19, "receipt_image_ref": "r.jpg", "display_name": "big"},
            headers=auth_headers(user),
        )

        assert r.status_code == 400
        assert r.json()["code"] == "validation_error"

    async def test_admin_credit_above_max_amount(self, client, make_user, auth_headers):
        user = await make_user(balance=1)
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/coins/credit",
            json={"target_user_id": user.id, "amount": settings.MAX_COIN_AMOUNT + 1},
            headers=auth_headers(admin),
        )

        assert r.status_code == 400
        assert r.json()["code"] == "validation_error"

    async def test_credit_overflowing_balance(self, client, make_user, auth_headers):
        start = 2**63 - 5
        user = await make_user(balance=start)
        admin = await make_user(role="admin")

        r = await client.post(
            f"{API}/admin/coins/credit",
            json={"target_user_id": user.id, "amount": 10},
            headers=auth_headers(admin),
        )

        assert r.status_code == 400
        body = r.json()
        assert body["code"] == "validation_error"
        assert body["current_balance"] == start

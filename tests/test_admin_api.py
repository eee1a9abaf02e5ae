import pytest

from tableside.db.session import SessionLocal
from tableside.models.admin_session import AdminSession
from tableside.services.auth import create_or_reset_user, pwd_context

ADMIN_ROUTES = [
    ("get", "/api/analytics/today", None),
    ("get", "/api/analytics/sales-by-hour", None),
    ("get", "/api/analytics/popular-items", None),
    ("get", "/api/admin/menu-items", None),
    ("post", "/api/admin/menu-items", {"name": "Tea", "price": 2}),
    ("put", "/api/admin/menu-items/1", {"price": 3}),
    ("delete", "/api/admin/menu-items/1", None),
    ("get", "/api/admin/categories", None),
    ("post", "/api/admin/categories", {"name": "Desserts"}),
    ("put", "/api/admin/categories/1", {"name": "Sweets"}),
    ("delete", "/api/admin/categories/1", None),
    ("patch", "/api/orders/1/payment", {"paymentStatus": "paid"}),
]


@pytest.mark.parametrize("method, path, body", ADMIN_ROUTES)
def test_admin_routes_reject_anonymous(client, method, path, body):
    kwargs = {"json": body} if body is not None else {}

    resp = client.request(method.upper(), path, **kwargs)

    assert resp.status_code == 401
    assert "message" in resp.json()


def test_status_before_and_after_login(client):
    assert client.get("/api/admin/status").json() == {"isAuthenticated": False, "principal": None, "role": None}

    resp = client.post("/api/admin/login", json={"password": "letmein"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Login successful"}
    status = client.get("/api/admin/status").json()
    assert status["isAuthenticated"] is True
    assert status["role"] == "admin"


def test_login_wrong_password(client):
    resp = client.post("/api/admin/login", json={"password": "nope"})

    assert resp.status_code == 401
    assert client.get("/api/admin/status").json()["isAuthenticated"] is False


def test_admin_route_succeeds_after_login(admin_client):
    assert admin_client.get("/api/analytics/today").status_code == 200
    assert admin_client.get("/api/admin/categories").status_code == 200


def test_logout_revokes_server_session(admin_client):
    resp = admin_client.post("/api/admin/logout")

    assert resp.status_code == 200
    assert admin_client.get("/api/admin/status").json()["isAuthenticated"] is False
    assert admin_client.get("/api/analytics/today").status_code == 401
    db = SessionLocal()
    try:
        assert all(s.revoked for s in db.query(AdminSession).all())
    finally:
        db.close()


def test_revoked_session_cookie_is_not_accepted(admin_client):
    db = SessionLocal()
    try:
        for s in db.query(AdminSession).all():
            s.revoked = True
        db.commit()
    finally:
        db.close()

    assert admin_client.get("/api/analytics/today").status_code == 401


def test_named_account_login(client, db):
    create_or_reset_user(db, "kitchen", "s3cret", role="staff")
    create_or_reset_user(db, "manager", "b0ss")

    staff = client.post("/api/admin/login", json={"username": "kitchen", "password": "s3cret"})
    assert staff.status_code == 200
    assert client.get("/api/admin/status").json()["principal"] == "kitchen"
    # staff accounts are authenticated but not allowed on admin-only routes
    assert client.get("/api/analytics/today").status_code == 401

    client.post("/api/admin/logout")
    manager = client.post("/api/admin/login", json={"username": "manager", "password": "b0ss"})
    assert manager.status_code == 200
    assert client.get("/api/analytics/today").status_code == 200


def test_named_account_wrong_password(client, db):
    create_or_reset_user(db, "manager", "b0ss")

    resp = client.post("/api/admin/login", json={"username": "manager", "password": "letmein"})

    assert resp.status_code == 401


def test_user_passwords_are_hashed(db):
    user = create_or_reset_user(db, "manager", "b0ss")

    assert user.password_hash != "b0ss"
    assert pwd_context.verify("b0ss", user.password_hash)

from datetime import timedelta

from jose import jwt

from conftest import make_user
from decorbook.core import security
from decorbook.models.user import User


def test_register_and_login_with_cookie(client, db):
    resp = client.post(
        "/api/auth/register", json={"name": "Dewi", "email": "Dewi@Example.com", "password": "rahasia"}
    )
    assert resp.status_code == 201, resp.text
    user = resp.json()["user"]
    assert user["email"] == "dewi@example.com"
    assert user["role"] == "USER"
    assert "hashed_password" not in user

    stored = db.query(User).filter(User.email == "dewi@example.com").one()
    assert stored.hashed_password != "rahasia"
    assert security.verify_password("rahasia", stored.hashed_password)

    resp = client.post("/api/auth/login", json={"email": "dewi@example.com", "password": "rahasia"})
    assert resp.status_code == 200
    assert "auth-token" in resp.cookies
    set_cookie = resp.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "max-age=604800" in set_cookie

    resp = client.get("/api/auth/me")
    assert resp.status_code == 200
    claims = resp.json()["user"]
    assert claims["sub"] == str(stored.id)
    assert claims["email"] == "dewi@example.com"
    assert claims["name"] == "Dewi"
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    resp = client.get("/api/auth/status")
    assert resp.json() == {
        "isLoggedIn": True,
        "user": {"id": str(stored.id), "name": "Dewi", "email": "dewi@example.com"},
    }

    client.post("/api/auth/logout")
    assert client.get("/api/auth/status").json() == {"isLoggedIn": False}
    assert client.get("/api/auth/me").status_code == 401


def test_register_duplicate_email(client, db):
    make_user(db, "dewi@example.com")
    resp = client.post(
        "/api/auth/register", json={"name": "Dewi", "email": "dewi@example.com", "password": "x"}
    )
    assert resp.status_code == 409


def test_register_missing_fields(client):
    resp = client.post("/api/auth/register", json={"email": "dewi@example.com"})
    assert resp.status_code == 400


def test_login_wrong_password(client, db):
    make_user(db, "dewi@example.com")
    resp = client.post("/api/auth/login", json={"email": "dewi@example.com", "password": "wrong"})
    assert resp.status_code == 401
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "wrong"})
    assert resp.status_code == 401


def test_invalid_and_expired_tokens(client, db, settings):
    user = make_user(db, "dewi@example.com")

    resp = client.get("/api/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401

    forged = jwt.encode({"sub": str(user.id)}, "other-secret", algorithm="HS256")
    assert client.get("/api/orders", headers={"Authorization": f"Bearer {forged}"}).status_code == 401

    expired = security.create_access_token(
        settings, str(user.id), user.email, user.name, expires_delta=timedelta(minutes=-1)
    )
    assert client.get("/api/orders", headers={"Authorization": f"Bearer {expired}"}).status_code == 401

    valid = security.create_access_token(settings, str(user.id), user.email, user.name)
    assert client.get("/api/orders", headers={"Authorization": f"Bearer {valid}"}).status_code == 200


def test_token_for_deleted_user(client, db, settings):
    token = security.create_access_token(settings, "4242", "ghost@example.com")
    assert client.get("/api/orders", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_admin_routes_require_admin_role(client, user_headers, admin_headers):
    assert client.get("/api/admin/packages").status_code == 401
    assert client.get("/api/admin/packages", headers=user_headers).status_code == 403
    assert client.get("/api/admin/packages", headers=admin_headers).status_code == 200


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json()["status"] == "healthy"


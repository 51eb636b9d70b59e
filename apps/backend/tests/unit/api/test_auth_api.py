"""
Name: Auth API Tests

Responsibilities:
  - Login per portal sets auth_token (httpOnly) + user_role cookies
  - Failed logins answer 401 with one generic message
  - /api/auth/me honours Bearer tokens and session expiry
  - Logout clears the markers; portal sections go through the route guard
"""

import pytest
from fastapi.testclient import TestClient
from oficina.api.main import create_app
from oficina.identity.dependencies import get_clock

pytestmark = pytest.mark.unit


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


def _set_cookie_headers(response) -> str:
    return "\n".join(response.headers.get_list("set-cookie"))


# -----------------------------------------------------------------------------
# Login
# -----------------------------------------------------------------------------


def test_client_login_by_cpf_sets_session_cookies(client):
    res = client.post("/api/auth/login/client", json={"national_id": "123.456.789-00"})

    assert res.status_code == 200
    body = res.json()
    assert body["user"]["role"] == "cliente"
    assert body["user"]["name"] == "João Silva"
    assert body["token_type"] == "bearer"

    cookies = _set_cookie_headers(res)
    assert "auth_token=" in cookies
    assert "user_role=cliente" in cookies
    auth_cookie = next(
        c for c in res.headers.get_list("set-cookie") if c.startswith("auth_token=")
    )
    assert "HttpOnly" in auth_cookie
    assert "samesite=strict" in auth_cookie.lower()


def test_employee_login_returns_employee_identity(client):
    res = client.post(
        "/api/auth/login/employee", json={"username": "jose", "password": "123456"}
    )

    assert res.status_code == 200
    user = res.json()["user"]
    assert user["role"] == "funcionario"
    assert user["username"] == "jose"
    assert "password_hash" not in user


def test_admin_login_returns_admin_identity(client):
    res = client.post(
        "/api/auth/login/admin", json={"username": "admin", "password": "admin123"}
    )

    assert res.status_code == 200
    assert res.json()["user"]["role"] == "admin"
    assert "user_role=admin" in _set_cookie_headers(res)


@pytest.mark.parametrize(
    "path,payload",
    [
        ("/api/auth/login/client", {"national_id": "000.000.000-00"}),
        ("/api/auth/login/employee", {"username": "jose", "password": "errada"}),
        ("/api/auth/login/employee", {"username": "admin", "password": "admin123"}),
        ("/api/auth/login/admin", {"username": "jose", "password": "123456"}),
    ],
)
def test_failed_login_is_401_with_generic_message(client, path, payload):
    res = client.post(path, json=payload)

    assert res.status_code == 401
    assert res.headers["content-type"].startswith("application/problem+json")
    assert res.json()["code"] == "UNAUTHORIZED"
    assert res.json()["detail"] == "Credenciais inválidas."
    assert "auth_token=" not in _set_cookie_headers(res)


# -----------------------------------------------------------------------------
# Sesión
# -----------------------------------------------------------------------------


def test_me_requires_session(client):
    res = client.get("/api/auth/me")

    assert res.status_code == 401


def test_me_accepts_bearer_token(client):
    token = client.post(
        "/api/auth/login/employee", json={"username": "ana", "password": "123456"}
    ).json()["access_token"]
    client.cookies.clear()

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200
    assert res.json()["user"]["username"] == "ana"
    assert 0 < res.json()["expires_in"] <= 8 * 3600


def test_me_rejects_expired_session(app, clock):
    app.dependency_overrides[get_clock] = lambda: clock
    client = TestClient(app)
    token = client.post(
        "/api/auth/login/admin", json={"username": "admin", "password": "admin123"}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/api/auth/me", headers=headers).json()["expires_in"] == 8 * 3600

    clock.advance(hours=8)

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_tampered_token_is_rejected(client):
    token = client.post(
        "/api/auth/login/client", json={"national_id": "987.654.321-00"}
    ).json()["access_token"]
    client.cookies.clear()

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}x"})

    assert res.status_code == 401


def test_logout_clears_cookies_and_is_idempotent(client):
    client.post("/api/auth/login/client", json={"national_id": "123.456.789-00"})

    res = client.post("/api/auth/logout")

    assert res.status_code == 200
    assert res.json() == {"ok": True}
    cookies = _set_cookie_headers(res)
    assert "auth_token=" in cookies
    assert "user_role=" in cookies
    assert "Max-Age=0" in cookies

    assert client.post("/api/auth/logout").status_code == 200


# -----------------------------------------------------------------------------
# Route guard sobre la app completa
# -----------------------------------------------------------------------------


def test_portal_section_redirects_anonymous_to_login(client):
    res = client.get("/dashboard", follow_redirects=False)

    assert res.status_code == 307
    assert res.headers["location"] == "/login"


def test_portal_section_served_after_login(client):
    client.post("/api/auth/login/admin", json={"username": "admin", "password": "admin123"})

    res = client.get("/dashboard", follow_redirects=False)

    assert res.status_code == 200
    assert res.json()["section"] == "dashboard"
    assert res.json()["user"]["role"] == "admin"


def test_wrong_portal_redirects_by_default(client):
    client.post("/api/auth/login/client", json={"national_id": "123.456.789-00"})

    res = client.get("/funcionario", follow_redirects=False)

    assert res.status_code == 307
    assert res.headers["location"] == "/login"


def test_wrong_portal_can_answer_403(monkeypatch):
    monkeypatch.setenv("GUARD_DISTINCT_FORBIDDEN", "true")
    client = TestClient(create_app())
    client.post("/api/auth/login/client", json={"national_id": "123.456.789-00"})

    res = client.get("/admin", follow_redirects=False)

    assert res.status_code == 403
    assert res.json()["code"] == "FORBIDDEN"


def test_public_pages_and_health_need_no_session(client):
    home = client.get("/")

    assert home.status_code == 200
    assert home.json()["portals"] == {
        "admin": "/dashboard",
        "funcionario": "/funcionario",
        "cliente": "/cliente",
    }
    assert client.get("/login").status_code == 200
    assert client.get("/healthz").json() == {"ok": True}


def test_security_headers_present(client):
    res = client.get("/healthz")

    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "frame-ancestors 'none'" in res.headers["Content-Security-Policy"]
    assert res.headers["Cache-Control"] == "no-store"

from jose import jwt

from app.core.config import get_settings


def register(client, email="new@example.com", password="secret123"):
    return client.post(
        "/api/users/register",
        json={"name": "New User", "email": email, "password": password},
    )


def test_register_returns_token_and_customer(client):
    resp = register(client, email="New@Example.com")

    assert resp.status_code == 201
    data = resp.json()
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "customer"

    settings = get_settings()
    claims = jwt.decode(data["token"], settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    assert claims["sub"] == data["user"]["id"]
    assert claims["role"] == "customer"


def test_register_duplicate_email(client):
    register(client)

    resp = register(client)

    assert resp.status_code == 400
    assert resp.json() == {"detail": "User already exists", "kind": "invalid_input"}


def test_register_short_password(client):
    resp = register(client, password="123")

    assert resp.status_code == 422


def test_login_and_profile(client):
    register(client)

    resp = client.post(
        "/api/users/login",
        json={"email": "new@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    token = resp.json()["token"]

    profile = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.status_code == 200
    assert profile.json()["email"] == "new@example.com"


def test_login_wrong_password(client):
    register(client)

    resp = client.post(
        "/api/users/login",
        json={"email": "new@example.com", "password": "wrong-password"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    resp = client.post(
        "/api/users/login",
        json={"email": "ghost@example.com", "password": "whatever"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials"


def test_profile_requires_token(client):
    resp = client.get("/api/users/profile")

    assert resp.status_code == 401


def test_admin_endpoints(client, make_user, auth_headers):
    admin = make_user(email="admin@example.com", role="admin")
    customer = make_user(email="c@example.com")

    assert client.get("/api/users", headers=auth_headers(customer)).status_code == 403

    listing = client.get("/api/users", headers=auth_headers(admin))
    assert listing.status_code == 200
    assert {u["email"] for u in listing.json()} == {"admin@example.com", "c@example.com"}

    promoted = client.patch(
        f"/api/users/{customer.id}/role",
        json={"role": "admin"},
        headers=auth_headers(admin),
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "admin"

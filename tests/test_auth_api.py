"""
Tests for registration, login and bearer-token handling
"""

from datetime import timedelta

from quizly.core.security import SecurityUtils
from quizly.models.user import UserRole
from tests.conftest import API, auth_headers, make_user

REGISTRATION = {
    "username": "carol",
    "email": "carol@example.com",
    "password": "s3cret-pass",
    "first_name": "Carol",
    "last_name": "Jones",
}


def test_register_then_login(client):
    response = client.post(f"{API}/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    assert response.json()["message"] == "User registered successfully"

    response = client.post(f"{API}/auth/login", json={"username": "carol", "password": "s3cret-pass"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "Bearer"
    assert data["username"] == "carol"
    assert data["role"] == "USER"
    me = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.json()["data"]["email"] == "carol@example.com"


def test_register_duplicate_username_and_email(client, user):
    duplicate_name = dict(REGISTRATION, username=user.username)
    duplicate_email = dict(REGISTRATION, email=user.email)

    first = client.post(f"{API}/auth/register", json=duplicate_name)
    second = client.post(f"{API}/auth/register", json=duplicate_email)

    assert first.status_code == 409
    assert first.json()["message"] == "Username already exists"
    assert second.status_code == 409
    assert second.json()["message"] == "Email already exists"


def test_register_validation_errors_map_fields(client):
    response = client.post(f"{API}/auth/register", json={"username": "x", "email": "not-an-email", "password": "1"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert set(body["data"]) >= {"username", "email", "password"}


def test_login_with_wrong_password_is_401(client, user):
    response = client.post(f"{API}/auth/login", json={"username": user.username, "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password"


def test_login_unknown_user_is_401(client):
    response = client.post(f"{API}/auth/login", json={"username": "ghost", "password": "whatever"})

    assert response.status_code == 401


def test_login_disabled_account_is_403(client, session_factory):
    make_user(session_factory, "dormant", is_active=False)

    response = client.post(f"{API}/auth/login", json={"username": "dormant", "password": "password123"})

    assert response.status_code == 403


def test_missing_token_is_401(client):
    response = client.get(f"{API}/users/me")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_garbage_token_is_401(client):
    response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_expired_token_is_401(client, user):
    token = SecurityUtils.create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=-1))

    response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_deleted_user_is_401(client, admin_headers, session_factory):
    doomed = make_user(session_factory, "doomed")
    assert client.delete(f"{API}/admin/users/{doomed.id}", headers=admin_headers).status_code == 200

    response = client.get(f"{API}/users/me", headers=auth_headers(doomed))

    assert response.status_code == 401


def test_token_for_inactive_user_is_403(client, session_factory):
    dormant = make_user(session_factory, "dormant", is_active=False)

    response = client.get(f"{API}/users/me", headers=auth_headers(dormant))

    assert response.status_code == 403


def test_role_failure_is_403_not_401(client, user_headers):
    response = client.get(f"{API}/admin/stats", headers=user_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


def test_password_hashing_round_trip():
    hashed = SecurityUtils.get_password_hash("hunter22")

    assert hashed != "hunter22"
    assert SecurityUtils.verify_password("hunter22", hashed)
    assert not SecurityUtils.verify_password("hunter23", hashed)


def test_admin_role_is_carried_in_login(client, session_factory):
    make_user(session_factory, "root", role=UserRole.ADMIN)

    data = client.post(f"{API}/auth/login", json={"username": "root", "password": "password123"}).json()["data"]

    assert data["role"] == "ADMIN"

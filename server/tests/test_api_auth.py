"""Tests for registration, login and token handling."""

import pytest

from conftest import API, TEST_PASSWORD, bearer, register
from hotel_api.core.security import create_access_token


@pytest.mark.asyncio
async def test_register_returns_token(test_client):
    """Registering creates a USER account and returns a token."""
    response = await test_client.post(
        f"{API}/auth/register",
        json={"name": "Meera Iyer", "email": "Meera@Example.com", "password": TEST_PASSWORD},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    assert body["data"]["email"] == "meera@example.com"
    assert body["data"]["name"] == "Meera Iyer"
    assert body["data"]["role"] == "USER"
    assert body["data"]["token"]


@pytest.mark.asyncio
async def test_register_duplicate_email(test_client):
    """A second account with the same email (any case) is refused."""
    await register(test_client, "dup@example.com")

    response = await test_client.post(
        f"{API}/auth/register",
        json={"name": "Someone Else", "email": "DUP@example.com", "password": TEST_PASSWORD},
    )

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Email already registered"}


@pytest.mark.asyncio
async def test_register_validation_errors(test_client):
    """Bad input is reported field by field with HTTP 400."""
    response = await test_client.post(
        f"{API}/auth/register",
        json={"name": "", "email": "not-an-email", "password": "123"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"name", "email", "password"} <= fields
    assert all(error["location"] == "body" for error in body["errors"])


@pytest.mark.asyncio
async def test_login_success(test_client):
    """Valid credentials produce a token usable on protected routes."""
    await register(test_client, "login@example.com")

    response = await test_client.post(
        f"{API}/auth/login",
        json={"email": "login@example.com", "password": TEST_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"

    logout = await test_client.post(f"{API}/auth/logout", headers=bearer(body["data"]["token"]))
    assert logout.status_code == 200
    assert logout.json() == {"success": True, "message": "Logout successful"}


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [
    ("login@example.com", "wrong-password"),
    ("nobody@example.com", TEST_PASSWORD),
])
async def test_login_invalid_credentials(test_client, email, password):
    """Unknown email and wrong password get the same answer."""
    await register(test_client, "login@example.com")

    response = await test_client.post(f"{API}/auth/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_protected_route_requires_token(test_client):
    """A missing token is a 401 with the Bearer challenge."""
    response = await test_client.post(f"{API}/auth/logout")

    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Bearer not-a-jwt", "Basic abc", "Bearer"])
async def test_protected_route_rejects_bad_token(test_client, header):
    """Malformed or foreign tokens are refused."""
    response = await test_client.post(f"{API}/auth/logout", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.json()["message"] in ("Access token required", "Invalid or expired token")


@pytest.mark.asyncio
async def test_admin_route_refuses_regular_user(test_client, catalog):
    """Admin-only routes answer 403 to a USER token."""
    token = create_access_token(12345, "user@example.com", "USER")

    response = await test_client.delete(f"{API}/seasonal-pricing/1", headers=bearer(token))

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"

import pytest
from httpx import AsyncClient

from tests.fixtures.api_client import register


@pytest.mark.asyncio
async def test_successful_registration(client: AsyncClient):
    """New account is created with a normalized email and no credential material returned"""
    response = await client.post(
        "/auth/register",
        json={
            "email": "Grace.Hopper@Example.com",
            "password": "SecurePass123!",
            "first_name": "Grace",
            "last_name": "Hopper",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "grace.hopper@example.com"
    assert data["first_name"] == "Grace"
    assert "id" in data
    assert "password" not in data
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: AsyncClient):
    await register(client, email="user@example.com")

    response = await client.post(
        "/auth/register",
        json={
            "email": "USER@example.com",
            "password": "AnotherPass123!",
            "first_name": "Ada",
            "last_name": "Lovelace",
        },
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "password": "SecurePass123!", "first_name": "A", "last_name": "B"},
        {"email": "a@example.com", "password": "short", "first_name": "A", "last_name": "B"},
        {"email": "a@example.com", "password": "SecurePass123!", "first_name": "", "last_name": "B"},
    ],
)
async def test_invalid_payload_is_rejected(client: AsyncClient, payload):
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

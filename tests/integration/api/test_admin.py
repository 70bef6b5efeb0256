from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.fixtures.api_client import login, register


async def lock_by_failures(client):
    """Five wrong passwords from different IPs lock the account without blacklisting any IP"""
    for i in range(5):
        await login(client, password="WrongPassword!", ip=f"198.51.100.{100 + i}")


@pytest.mark.asyncio
async def test_admin_requires_api_key(client: AsyncClient):
    response = await client.get("/admin/login-attempts")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_admin_rejects_wrong_api_key(client: AsyncClient):
    response = await client.get(
        "/admin/login-attempts", headers={"X-Admin-API-Key": "wrong-key"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_list_login_attempts(client: AsyncClient, admin_headers):
    await register(client)
    await login(client)
    await login(client, password="WrongPassword!")
    await login(client, email="ghost@example.com")

    response = await client.get("/admin/login-attempts", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total"] == 3
    assert len(data["data"]) == 3

    response = await client.get(
        "/admin/login-attempts",
        params={"email": "ghost@example.com"},
        headers=admin_headers,
    )
    [attempt] = response.json()["data"]
    assert attempt["account_id"] is None
    assert attempt["status"] == "failed"

    response = await client.get(
        "/admin/login-attempts", params={"page": 2, "limit": 2}, headers=admin_headers
    )
    data = response.json()
    assert len(data["data"]) == 1
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


@pytest.mark.asyncio
async def test_failed_login_events_can_be_resolved(client: AsyncClient, admin_headers):
    await register(client)
    await lock_by_failures(client)

    response = await client.get(
        "/admin/suspicious-events", params={"resolved": False}, headers=admin_headers
    )

    assert response.status_code == 200
    [event] = response.json()["data"]
    assert event["type"] == "account_locked"
    assert event["severity"] == "high"
    assert event["email"] == "user@example.com"

    response = await client.put(
        f"/admin/suspicious-events/{event['id']}/resolve",
        json={"resolved_by": "secops@example.com"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    resolved = response.json()
    assert resolved["resolved"] is True
    assert resolved["resolved_by"] == "secops@example.com"
    assert resolved["resolved_at"] is not None

    response = await client.get(
        "/admin/suspicious-events", params={"resolved": False}, headers=admin_headers
    )
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_resolve_unknown_event(client: AsyncClient, admin_headers):
    response = await client.put(
        f"/admin/suspicious-events/{uuid4()}/resolve",
        json={"resolved_by": "secops@example.com"},
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "EVENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_unlock_account_restores_login(client: AsyncClient, admin_headers):
    account = await register(client)
    await lock_by_failures(client)
    assert (await login(client)).status_code == 401

    response = await client.get(f"/admin/accounts/{account['id']}", headers=admin_headers)
    details = response.json()
    assert details["account"]["is_locked"] is True
    assert details["account"]["lock_reason"] == "Multiple failed login attempts"
    assert len(details["login_history"]) == 5
    assert len(details["suspicious_events"]) == 1

    response = await client.put(f"/admin/accounts/{account['id']}/unlock", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["is_locked"] is False
    assert response.json()["failed_attempts"] == 0

    response = await login(client)
    assert response.status_code == 200
    assert response.json()["outcome"] == "success"


@pytest.mark.asyncio
async def test_unknown_account(client: AsyncClient, admin_headers):
    response = await client.get(f"/admin/accounts/{uuid4()}", headers=admin_headers)
    assert response.status_code == 404

    response = await client.put(f"/admin/accounts/{uuid4()}/unlock", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_dashboard_stats(client: AsyncClient, admin_headers):
    await register(client)
    await login(client)
    await login(client, password="WrongPassword!")

    response = await client.get("/admin/dashboard-stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["login_attempts"]["total"] == 2
    assert stats["login_attempts"]["last_hour"] == 2
    assert stats["status_distribution"] == {"success": 1, "failed": 1}
    assert stats["top_countries"] == [{"country": "NO", "count": 2}]
    assert sum(h["count"] for h in stats["hourly_attempts"]) == 2
    assert stats["locked_accounts"] == 0
    assert stats["high_risk_attempts"] == 0


@pytest.mark.asyncio
async def test_location_data(client: AsyncClient, admin_headers):
    await register(client)
    await login(client)

    response = await client.get("/admin/location-data", headers=admin_headers)

    assert response.status_code == 200
    [marker] = response.json()["markers"]
    assert marker["city"] == "Oslo"
    assert marker["status"] == "success"
    assert marker["lat"] == pytest.approx(59.9139)

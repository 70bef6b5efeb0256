import pytest
from httpx import AsyncClient

from tests.fixtures.api_client import (
    BERGEN_IP,
    HOME_IP,
    IPHONE_SAFARI,
    login,
    register,
    step_up_login,
)


@pytest.mark.asyncio
async def test_first_login_is_safe(client: AsyncClient):
    """First login has no history to compare against and is granted a session"""
    account = await register(client)

    response = await login(client)

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "success"
    assert data["risk_score"] == 0
    assert data["risk_level"] == "safe"
    assert data["account"]["id"] == account["id"]
    assert isinstance(data["session_token"], str)
    assert data["login_attempt_id"]


@pytest.mark.asyncio
async def test_session_token_resolves_profile(client: AsyncClient):
    await register(client)
    token = (await login(client)).json()["session_token"]

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "user@example.com"
    assert data["is_locked"] is False
    assert data["last_login_ip"] == HOME_IP
    assert data["last_login_city"] == "Oslo"


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(client: AsyncClient):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_look_the_same(client: AsyncClient):
    await register(client)

    wrong_password = await login(client, password="WrongPassword!")
    unknown_email = await login(client, email="ghost@example.com")

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_repeated_failures_blacklist_ip(client: AsyncClient):
    """Five failures from one IP block it, even for correct credentials"""
    await register(client)

    for _ in range(5):
        response = await login(client, password="WrongPassword!")
        assert response.status_code == 401

    response = await login(client)
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "TOO_MANY_ATTEMPTS"

    # The same failures locked the account as well
    response = await login(client, ip="198.51.100.99")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_repeated_failures_lock_account(client: AsyncClient):
    """Five failures for one email from different IPs lock the account"""
    await register(client)

    for i in range(5):
        await login(client, password="WrongPassword!", ip=f"198.51.100.{100 + i}")

    response = await login(client)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_new_device_and_location_require_step_up(client: AsyncClient, dispatcher, notifier):
    data = await step_up_login(client)

    assert data["requires_step_up"] is True
    assert data["risk_score"] == 70
    assert data["risk_level"] == "warning"
    assert data["reasons"] == ["new_device", "new_location", "new_device_and_location_combination"]
    assert "session_token" not in data

    await dispatcher.drain()
    code = notifier.codes["user@example.com"]
    assert len(code) == 6
    assert code.isdigit()


@pytest.mark.asyncio
async def test_critical_login_is_blocked(client: AsyncClient, dispatcher, notifier):
    """New device + new location + prior failures is critical: 423 and the account locks"""
    await register(client)
    assert (await login(client)).status_code == 200

    for _ in range(2):
        await login(client, password="WrongPassword!")

    response = await login(client, ip=BERGEN_IP, user_agent=IPHONE_SAFARI)

    assert response.status_code == 423
    data = response.json()
    assert data["outcome"] == "blocked"
    assert data["locked"] is True
    assert data["risk_score"] == 80
    assert data["risk_level"] == "critical"

    await dispatcher.drain()
    [(email, alert)] = notifier.high_risk_alerts
    assert email == "user@example.com"
    assert alert.city == "Bergen"

    # Locked, even from the usual device
    response = await login(client)
    assert response.status_code == 401

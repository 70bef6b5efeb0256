from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.fixtures.api_client import (
    BERGEN_IP,
    IPHONE_SAFARI,
    login,
    register,
    step_up_login,
)


async def issued_code(dispatcher, notifier):
    await dispatcher.drain()
    return notifier.codes["user@example.com"]


def wrong(code):
    return "000000" if code != "000000" else "111111"


@pytest.mark.asyncio
async def test_correct_code_grants_session(client: AsyncClient, dispatcher, notifier):
    step_up = await step_up_login(client)
    code = await issued_code(dispatcher, notifier)

    response = await client.post(
        "/auth/verify-otp",
        json={"login_attempt_id": step_up["login_attempt_id"], "code": code},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["session_token"]
    assert data["login_attempt_id"] == step_up["login_attempt_id"]
    assert data["risk_level"] == "warning"

    # Verified device and location are now part of the history
    response = await login(client, ip=BERGEN_IP, user_agent=IPHONE_SAFARI)
    assert response.status_code == 200
    assert response.json()["outcome"] == "success"


@pytest.mark.asyncio
async def test_code_cannot_be_reused(client: AsyncClient, dispatcher, notifier):
    step_up = await step_up_login(client)
    code = await issued_code(dispatcher, notifier)
    payload = {"login_attempt_id": step_up["login_attempt_id"], "code": code}

    assert (await client.post("/auth/verify-otp", json=payload)).status_code == 200

    response = await client.post("/auth/verify-otp", json=payload)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "CHALLENGE_NOT_FOUND"


@pytest.mark.asyncio
async def test_wrong_code_reports_remaining_attempts(client: AsyncClient, dispatcher, notifier):
    step_up = await step_up_login(client)
    code = await issued_code(dispatcher, notifier)

    response = await client.post(
        "/auth/verify-otp",
        json={"login_attempt_id": step_up["login_attempt_id"], "code": wrong(code)},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_CODE"
    assert error["details"] == {"remaining_attempts": 2}


@pytest.mark.asyncio
async def test_challenge_exhausted_after_three_wrong_codes(client: AsyncClient, dispatcher, notifier):
    step_up = await step_up_login(client)
    code = await issued_code(dispatcher, notifier)
    attempt_id = step_up["login_attempt_id"]

    for _ in range(3):
        response = await client.post(
            "/auth/verify-otp", json={"login_attempt_id": attempt_id, "code": wrong(code)}
        )
        assert response.status_code == 400

    # Even the right code is refused now
    response = await client.post(
        "/auth/verify-otp", json={"login_attempt_id": attempt_id, "code": code}
    )
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "CHALLENGE_EXHAUSTED"

    response = await client.post(
        "/auth/verify-otp", json={"login_attempt_id": attempt_id, "code": code}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_login_attempt(client: AsyncClient):
    response = await client.post(
        "/auth/verify-otp", json={"login_attempt_id": str(uuid4()), "code": "123456"}
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "CHALLENGE_NOT_FOUND"


@pytest.mark.asyncio
async def test_successful_login_attempt_cannot_be_verified(client: AsyncClient):
    await register(client)
    attempt_id = (await login(client)).json()["login_attempt_id"]

    response = await client.post(
        "/auth/verify-otp", json={"login_attempt_id": attempt_id, "code": "123456"}
    )

    assert response.status_code == 404

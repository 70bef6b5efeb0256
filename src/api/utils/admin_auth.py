"""
Admin API Key Authentication

Validates admin API keys for the security administration endpoints.
"""

import hmac

from fastapi import Header, status

from config import ApplicationConfig
from src.api.error import ClientError
from src.libs.result import Error


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Admin operators (dashboards, incident tooling) authenticate with a shared
    key instead of an account session.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    valid_admin_key = ApplicationConfig.ADMIN_API_KEY

    if not hmac.compare_digest(x_admin_api_key.encode(), valid_admin_key.encode()):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True

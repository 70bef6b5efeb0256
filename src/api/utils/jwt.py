from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(account_id: UUID, email: str, expires_minutes: int = 60) -> str:
    """
    Generate a session token

    Args:
        account_id: Account UUID
        email: Account email (informational claim)
        expires_minutes: Token lifetime

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = {
        "account_id": str(account_id),
        "email": email,
        "exp": now + timedelta(minutes=expires_minutes),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None

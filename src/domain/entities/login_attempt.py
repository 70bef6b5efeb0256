"""
LoginAttempt Entity

Audit record of one authentication try.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow

from .enums import LoginStatus, RiskLevel


class LoginAttempt(SQLModel, table=True):
    """
    LoginAttempt entity - append-only audit trail of login requests.

    Business Rules:
    - Created when a login request is processed, finalized before responding
    - Immutable once status is terminal (success, failed, blocked, otp_verified)
    - otp_pending may move to otp_verified exactly once
    - account_id is null when the email matched no account
    """

    __tablename__ = "login_attempts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: Optional[UUID] = Field(default=None, foreign_key="accounts.id", index=True)
    email: str = Field(max_length=255, index=True)

    # Network / device context
    ip: str = Field(max_length=64, index=True)
    user_agent: str = Field(default="", max_length=512)
    device_fingerprint: str = Field(max_length=64)
    browser: Optional[str] = Field(default=None, max_length=120)
    os: Optional[str] = Field(default=None, max_length=120)
    device_type: Optional[str] = Field(default=None, max_length=32)
    device_name: Optional[str] = Field(default=None, max_length=120)

    # Resolved location
    city: str = Field(default="Unknown", max_length=120)
    country: str = Field(default="Unknown", max_length=120, index=True)
    latitude: float = Field(default=0.0)
    longitude: float = Field(default=0.0)

    # Risk assessment
    risk_score: int = Field(default=0)
    risk_level: RiskLevel = Field(default=RiskLevel.safe, index=True)
    reasons: list = Field(default_factory=list, sa_column=Column(JSON))
    risk_factors: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    is_new_device: bool = Field(default=False)
    is_new_location: bool = Field(default=False)
    is_impossible_travel: bool = Field(default=False)
    is_odd_login_time: bool = Field(default=False)

    # Outcome
    status: LoginStatus = Field(default=LoginStatus.failed)
    otp_sent: bool = Field(default=False)
    otp_verified: bool = Field(default=False)
    ip_rate_limited: bool = Field(default=False)
    user_rate_limited: bool = Field(default=False)

    # Timestamps
    timestamp: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    login_time: str = Field(default="", max_length=5)  # "HH:MM"

    __table_args__ = (
        Index("idx_login_attempt_email_ts", "email", "timestamp"),
        Index("idx_login_attempt_ip_ts", "ip", "timestamp"),
        Index("idx_login_attempt_risk_score", "risk_score"),
        Index("idx_login_attempt_ts", "timestamp"),
    )

"""
Challenge Entity

Step-up one-time code tied to a single login attempt.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Challenge(SQLModel, table=True):
    """
    Challenge entity - ephemeral OTP for step-up verification.

    Business Rules:
    - Code stored as SHA-256 hash, never in plain text
    - Expires 10 minutes after creation; expired rows are treated as absent
    - At most 3 verification attempts
    - One active challenge per login attempt
    - Deleted on success, on attempt exhaustion, or by expiry
    """

    __tablename__ = "challenges"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)
    login_attempt_id: UUID = Field(
        foreign_key="login_attempts.id", nullable=False, unique=True, index=True
    )
    email: str = Field(max_length=255)

    code_hash: str = Field(max_length=64)
    attempts: int = Field(default=0)
    is_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_challenge_expires_at", "expires_at"),)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

"""
SuspiciousEvent Entity

Append-only security log written as a side effect of authentication.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow

from .enums import Severity, SuspiciousEventType


class SuspiciousEvent(SQLModel, table=True):
    """
    SuspiciousEvent entity - security log entry.

    Business Rules:
    - Created by the login pipeline only
    - Only the resolution fields are ever updated (admin resolve action)
    - details holds free-form context (failed counts, risk assessment, ...)
    """

    __tablename__ = "suspicious_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: Optional[UUID] = Field(default=None, foreign_key="accounts.id", index=True)
    email: Optional[str] = Field(default=None, max_length=255)

    type: SuspiciousEventType
    severity: Severity
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    ip: Optional[str] = Field(default=None, max_length=64)
    city: Optional[str] = Field(default=None, max_length=120)
    country: Optional[str] = Field(default=None, max_length=120)

    # Resolution
    resolved: bool = Field(default=False)
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    resolved_by: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    timestamp: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_suspicious_event_email_ts", "email", "timestamp"),
        Index("idx_suspicious_event_severity", "severity"),
        Index("idx_suspicious_event_ts", "timestamp"),
        Index("idx_suspicious_event_resolved", "resolved"),
    )

    def resolve(self, resolved_by: str, at: datetime) -> None:
        self.resolved = True
        self.resolved_by = resolved_by
        self.resolved_at = at

"""
AccountDevice Entity

A device fingerprint that has completed a login for an account.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow

if TYPE_CHECKING:
    from .account import Account


class AccountDevice(SQLModel, table=True):
    """
    AccountDevice entity - one entry of an account's device history.

    Business Rules:
    - Appended only after a successful (or step-up verified) login
    - Fingerprint is a heuristic hash, not proof of device identity
    - Ordered by first_seen_at
    """

    __tablename__ = "account_devices"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)

    device_fingerprint: str = Field(max_length=64)
    device_name: Optional[str] = Field(default=None, max_length=120)
    browser: Optional[str] = Field(default=None, max_length=120)
    os: Optional[str] = Field(default=None, max_length=120)
    is_verified: bool = Field(default=False)

    # Timestamps
    first_seen_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_seen_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    account: Optional["Account"] = Relationship(back_populates="devices")

    __table_args__ = (
        Index("idx_account_device_fingerprint", "account_id", "device_fingerprint"),
    )

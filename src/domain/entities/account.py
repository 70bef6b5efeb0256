"""
Account Entity

Represents a person who can authenticate against the service.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow

if TYPE_CHECKING:
    from .account_device import AccountDevice
    from .account_location import AccountLocation


class Account(SQLModel, table=True):
    """
    Account entity - identity record with lock state and login history.

    Business Rules:
    - Email is unique and stored lower-cased
    - Password stored as bcrypt hash (cost factor 12)
    - At most one active lock reason; a newer lock overwrites the old one
    - A lock is in effect only while lock_until is in the future
    - Never hard-deleted
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)

    # Lock state
    is_locked: bool = Field(default=False)
    lock_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    lock_reason: Optional[str] = Field(default=None, max_length=255)
    failed_attempts: int = Field(default=0)

    # Last login snapshot (coordinates double as the last known location)
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_ip: Optional[str] = Field(default=None, max_length=64)
    last_login_city: Optional[str] = Field(default=None, max_length=120)
    last_login_country: Optional[str] = Field(default=None, max_length=120)
    last_login_latitude: Optional[float] = None
    last_login_longitude: Optional[float] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    devices: list["AccountDevice"] = Relationship(back_populates="account")
    locations: list["AccountLocation"] = Relationship(back_populates="account")

    __table_args__ = (Index("idx_account_is_locked", "is_locked"),)

    def lock_active(self, now: datetime) -> bool:
        """True while an explicit lock is still in effect"""
        return (
            self.is_locked
            and self.lock_until is not None
            and self.lock_until > now
        )

    def lock(self, reason: str, until: datetime) -> None:
        self.is_locked = True
        self.lock_reason = reason
        self.lock_until = until

    def unlock(self) -> None:
        self.is_locked = False
        self.lock_reason = None
        self.lock_until = None

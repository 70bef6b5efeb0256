"""
AccountLocation Entity

A location an account has successfully logged in from.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow

if TYPE_CHECKING:
    from .account import Account


class AccountLocation(SQLModel, table=True):
    """
    AccountLocation entity - one entry of an account's location history.

    Business Rules:
    - Appended only after a successful (or step-up verified) login
    - Also serves the IP reputation check (source IP + seen_at)
    """

    __tablename__ = "account_locations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)

    ip: str = Field(max_length=64)
    city: str = Field(max_length=120)
    country: str = Field(max_length=120)
    latitude: float = Field(default=0.0)
    longitude: float = Field(default=0.0)

    seen_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    account: Optional["Account"] = Relationship(back_populates="locations")

    __table_args__ = (Index("idx_account_location_seen", "account_id", "seen_at"),)

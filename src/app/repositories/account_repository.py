from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Account


class IAccountRepository(ABC):
    """Account repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Create a new account"""
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Update existing account"""
        pass

    @abstractmethod
    async def count_locked(self, now: datetime) -> int:
        """Count accounts whose lock is still in effect"""
        pass

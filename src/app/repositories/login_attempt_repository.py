from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import LoginAttempt, RiskLevel


class ILoginAttemptRepository(ABC):
    """Login attempt repository interface - application layer"""

    @abstractmethod
    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        """Record a login attempt"""
        pass

    @abstractmethod
    async def get_by_id(self, attempt_id: UUID) -> Optional[LoginAttempt]:
        """Get login attempt by ID"""
        pass

    @abstractmethod
    async def update(self, attempt: LoginAttempt) -> LoginAttempt:
        """Update a pending login attempt"""
        pass

    @abstractmethod
    async def list_filtered(
        self,
        risk_level: Optional[RiskLevel] = None,
        country: Optional[str] = None,
        email: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[LoginAttempt], int]:
        """Newest first; returns (page, total matching)"""
        pass

    @abstractmethod
    async def get_recent_by_account(
        self, account_id: UUID, limit: int = 20
    ) -> List[LoginAttempt]:
        """Most recent attempts for an account, newest first"""
        pass

    @abstractmethod
    async def get_since(self, since: datetime, limit: int = 1000) -> List[LoginAttempt]:
        """Attempts with timestamp after since, newest first"""
        pass

    @abstractmethod
    async def count(
        self,
        since: Optional[datetime] = None,
        risk_level: Optional[RiskLevel] = None,
    ) -> int:
        """Count attempts, optionally after since and/or at a risk level"""
        pass

    @abstractmethod
    async def count_grouped(self, column: str) -> Dict[str, int]:
        """Counts grouped by risk_level, status or country"""
        pass

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Severity, SuspiciousEvent, SuspiciousEventType


class ISuspiciousEventRepository(ABC):
    """Suspicious event repository interface - application layer"""

    @abstractmethod
    async def create(self, event: SuspiciousEvent) -> SuspiciousEvent:
        """Append a security log entry"""
        pass

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Optional[SuspiciousEvent]:
        """Get event by ID"""
        pass

    @abstractmethod
    async def update(self, event: SuspiciousEvent) -> SuspiciousEvent:
        """Update resolution state"""
        pass

    @abstractmethod
    async def list_filtered(
        self,
        severity: Optional[Severity] = None,
        type: Optional[SuspiciousEventType] = None,
        resolved: Optional[bool] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[SuspiciousEvent], int]:
        """Newest first; returns (page, total matching)"""
        pass

    @abstractmethod
    async def get_recent_by_account(
        self, account_id: UUID, limit: int = 10
    ) -> List[SuspiciousEvent]:
        """Most recent events for an account, newest first"""
        pass

    @abstractmethod
    async def count(self, resolved: Optional[bool] = None) -> int:
        """Count events, optionally by resolution state"""
        pass

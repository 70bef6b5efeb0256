from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Challenge


class IChallengeRepository(ABC):
    """Challenge repository interface - application layer"""

    @abstractmethod
    async def create(self, challenge: Challenge) -> Challenge:
        """Create a challenge"""
        pass

    @abstractmethod
    async def get_active_by_login_attempt(
        self, login_attempt_id: UUID, now: datetime
    ) -> Optional[Challenge]:
        """
        Unexpired challenge for a login attempt.

        An expired row is deleted and reported as absent.
        """
        pass

    @abstractmethod
    async def increment_attempts(self, challenge: Challenge) -> int:
        """
        Atomically add one to the stored attempt counter.

        Returns the new value and refreshes challenge.attempts with it.
        """
        pass

    @abstractmethod
    async def delete(self, challenge: Challenge) -> None:
        """Delete a challenge"""
        pass

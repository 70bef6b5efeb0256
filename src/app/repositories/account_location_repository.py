from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import AccountLocation


class IAccountLocationRepository(ABC):
    """Account location history repository interface - application layer"""

    @abstractmethod
    async def get_by_account(self, account_id: UUID) -> List[AccountLocation]:
        """Location history ordered by seen_at"""
        pass

    @abstractmethod
    async def create(self, location: AccountLocation) -> AccountLocation:
        """Append a location to the history"""
        pass

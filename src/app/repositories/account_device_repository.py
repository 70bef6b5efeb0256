from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import AccountDevice


class IAccountDeviceRepository(ABC):
    """Account device history repository interface - application layer"""

    @abstractmethod
    async def get_by_account(self, account_id: UUID) -> List[AccountDevice]:
        """Device history ordered by first_seen_at"""
        pass

    @abstractmethod
    async def create(self, device: AccountDevice) -> AccountDevice:
        """Append a device to the history"""
        pass

from abc import ABC, abstractmethod

from src.app.repositories.account_device_repository import IAccountDeviceRepository
from src.app.repositories.account_location_repository import IAccountLocationRepository
from src.app.repositories.account_repository import IAccountRepository
from src.app.repositories.challenge_repository import IChallengeRepository
from src.app.repositories.login_attempt_repository import ILoginAttemptRepository
from src.app.repositories.suspicious_event_repository import ISuspiciousEventRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository
    account_devices: IAccountDeviceRepository
    account_locations: IAccountLocationRepository
    login_attempts: ILoginAttemptRepository
    challenges: IChallengeRepository
    suspicious_events: ISuspiciousEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

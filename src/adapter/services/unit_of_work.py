from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.account_device_repository import AccountDeviceRepository
from src.adapter.repositories.account_location_repository import AccountLocationRepository
from src.adapter.repositories.account_repository import AccountRepository
from src.adapter.repositories.challenge_repository import ChallengeRepository
from src.adapter.repositories.login_attempt_repository import LoginAttemptRepository
from src.adapter.repositories.suspicious_event_repository import SuspiciousEventRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.accounts = AccountRepository(self.session)
        self.account_devices = AccountDeviceRepository(self.session)
        self.account_locations = AccountLocationRepository(self.session)
        self.login_attempts = LoginAttemptRepository(self.session)
        self.challenges = ChallengeRepository(self.session)
        self.suspicious_events = SuspiciousEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.account_device_repository import IAccountDeviceRepository
from src.domain.entities import AccountDevice


class AccountDeviceRepository(IAccountDeviceRepository):
    """AccountDevice repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account(self, account_id: UUID) -> List[AccountDevice]:
        stmt = (
            select(AccountDevice)
            .where(AccountDevice.account_id == account_id)
            .order_by(AccountDevice.first_seen_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, device: AccountDevice) -> AccountDevice:
        self.session.add(device)
        await self.session.flush()
        await self.session.refresh(device)
        return device

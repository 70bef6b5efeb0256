from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.account_location_repository import IAccountLocationRepository
from src.domain.entities import AccountLocation


class AccountLocationRepository(IAccountLocationRepository):
    """AccountLocation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account(self, account_id: UUID) -> List[AccountLocation]:
        stmt = (
            select(AccountLocation)
            .where(AccountLocation.account_id == account_id)
            .order_by(AccountLocation.seen_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, location: AccountLocation) -> AccountLocation:
        self.session.add(location)
        await self.session.flush()
        await self.session.refresh(location)
        return location

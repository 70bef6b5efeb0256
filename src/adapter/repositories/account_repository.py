from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.account_repository import IAccountRepository
from src.domain.entities import Account


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email address"""
        stmt = select(Account).where(Account.email == email.strip().lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        stmt = select(Account).where(Account.id == account_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, account: Account) -> Account:
        """Create a new account"""
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, account: Account) -> Account:
        """Update existing account"""
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def count_locked(self, now: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(Account)
            .where(Account.is_locked == True)  # noqa: E712
            .where(Account.lock_until > now)
        )
        result = await self.session.exec(stmt)
        return result.one()

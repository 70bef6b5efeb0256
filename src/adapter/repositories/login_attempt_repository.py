from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.login_attempt_repository import ILoginAttemptRepository
from src.domain.entities import LoginAttempt, RiskLevel

_GROUPABLE = {
    "risk_level": LoginAttempt.risk_level,
    "status": LoginAttempt.status,
    "country": LoginAttempt.country,
}


class LoginAttemptRepository(ILoginAttemptRepository):
    """LoginAttempt repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        self.session.add(attempt)
        await self.session.flush()
        await self.session.refresh(attempt)
        return attempt

    async def get_by_id(self, attempt_id: UUID) -> Optional[LoginAttempt]:
        stmt = select(LoginAttempt).where(LoginAttempt.id == attempt_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, attempt: LoginAttempt) -> LoginAttempt:
        self.session.add(attempt)
        await self.session.flush()
        await self.session.refresh(attempt)
        return attempt

    async def list_filtered(
        self,
        risk_level: Optional[RiskLevel] = None,
        country: Optional[str] = None,
        email: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[LoginAttempt], int]:
        conditions = []
        if risk_level is not None:
            conditions.append(LoginAttempt.risk_level == risk_level)
        if country:
            conditions.append(LoginAttempt.country == country)
        if email:
            conditions.append(LoginAttempt.email == email.strip().lower())

        stmt = select(LoginAttempt).where(*conditions)
        stmt = stmt.order_by(LoginAttempt.timestamp.desc()).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        items = list(result.all())

        count_stmt = select(func.count()).select_from(LoginAttempt).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()
        return items, total

    async def get_recent_by_account(
        self, account_id: UUID, limit: int = 20
    ) -> List[LoginAttempt]:
        stmt = (
            select(LoginAttempt)
            .where(LoginAttempt.account_id == account_id)
            .order_by(LoginAttempt.timestamp.desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_since(self, since: datetime, limit: int = 1000) -> List[LoginAttempt]:
        stmt = (
            select(LoginAttempt)
            .where(LoginAttempt.timestamp >= since)
            .order_by(LoginAttempt.timestamp.desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(
        self,
        since: Optional[datetime] = None,
        risk_level: Optional[RiskLevel] = None,
    ) -> int:
        stmt = select(func.count()).select_from(LoginAttempt)
        if since is not None:
            stmt = stmt.where(LoginAttempt.timestamp >= since)
        if risk_level is not None:
            stmt = stmt.where(LoginAttempt.risk_level == risk_level)
        result = await self.session.exec(stmt)
        return result.one()

    async def count_grouped(self, column: str) -> Dict[str, int]:
        field = _GROUPABLE.get(column)
        if field is None:
            raise ValueError(f"Cannot group login attempts by {column}")

        stmt = select(field, func.count()).group_by(field)
        result = await self.session.exec(stmt)
        counts: Dict[str, int] = {}
        for key, value in result.all():
            if key is None:
                continue
            counts[getattr(key, "value", key)] = value
        return counts

from typing import List, Optional, Tuple
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.suspicious_event_repository import ISuspiciousEventRepository
from src.domain.entities import Severity, SuspiciousEvent, SuspiciousEventType


class SuspiciousEventRepository(ISuspiciousEventRepository):
    """SuspiciousEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: SuspiciousEvent) -> SuspiciousEvent:
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get_by_id(self, event_id: UUID) -> Optional[SuspiciousEvent]:
        stmt = select(SuspiciousEvent).where(SuspiciousEvent.id == event_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, event: SuspiciousEvent) -> SuspiciousEvent:
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def list_filtered(
        self,
        severity: Optional[Severity] = None,
        type: Optional[SuspiciousEventType] = None,
        resolved: Optional[bool] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[SuspiciousEvent], int]:
        conditions = []
        if severity is not None:
            conditions.append(SuspiciousEvent.severity == severity)
        if type is not None:
            conditions.append(SuspiciousEvent.type == type)
        if resolved is not None:
            conditions.append(SuspiciousEvent.resolved == resolved)

        stmt = select(SuspiciousEvent).where(*conditions)
        stmt = stmt.order_by(SuspiciousEvent.timestamp.desc()).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        items = list(result.all())

        count_stmt = select(func.count()).select_from(SuspiciousEvent).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()
        return items, total

    async def get_recent_by_account(
        self, account_id: UUID, limit: int = 10
    ) -> List[SuspiciousEvent]:
        stmt = (
            select(SuspiciousEvent)
            .where(SuspiciousEvent.account_id == account_id)
            .order_by(SuspiciousEvent.timestamp.desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self, resolved: Optional[bool] = None) -> int:
        stmt = select(func.count()).select_from(SuspiciousEvent)
        if resolved is not None:
            stmt = stmt.where(SuspiciousEvent.resolved == resolved)
        result = await self.session.exec(stmt)
        return result.one()

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.challenge_repository import IChallengeRepository
from src.domain.entities import Challenge


class ChallengeRepository(IChallengeRepository):
    """Challenge repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, challenge: Challenge) -> Challenge:
        self.session.add(challenge)
        await self.session.flush()
        await self.session.refresh(challenge)
        return challenge

    async def get_active_by_login_attempt(
        self, login_attempt_id: UUID, now: datetime
    ) -> Optional[Challenge]:
        stmt = select(Challenge).where(Challenge.login_attempt_id == login_attempt_id)
        result = await self.session.exec(stmt)
        challenge = result.one_or_none()
        if challenge is None:
            return None

        if challenge.is_expired(now):
            await self.delete(challenge)
            return None
        return challenge

    async def increment_attempts(self, challenge: Challenge) -> int:
        stmt = (
            update(Challenge)
            .where(Challenge.id == challenge.id)
            .values(attempts=Challenge.attempts + 1)
            .returning(Challenge.attempts)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        attempts = result.scalar_one()
        # Not a pending change, the row already holds it
        set_committed_value(challenge, "attempts", attempts)
        return attempts

    async def delete(self, challenge: Challenge) -> None:
        await self.session.delete(challenge)
        await self.session.flush()

from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RiskLevel
from src.libs.result import Result, Return
from .dtos import LoginAttemptPage, LoginAttemptView, Pagination


class ListLoginAttemptsUseCase:
    """
    List login attempts for the admin console.

    Newest first, optionally filtered by risk level, country and email.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        page: int = 1,
        limit: int = 50,
        risk_level: Optional[RiskLevel] = None,
        country: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Result[LoginAttemptPage]:
        async with self.uow:
            attempts, total = await self.uow.login_attempts.list_filtered(
                risk_level=risk_level,
                country=country,
                email=email,
                offset=(page - 1) * limit,
                limit=limit,
            )

            return Return.ok(
                LoginAttemptPage(
                    data=[LoginAttemptView.from_entity(a) for a in attempts],
                    pagination=Pagination.build(page, limit, total),
                )
            )

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AccountDetailsResponse, AccountView, LoginAttemptView, SuspiciousEventView

LOGIN_HISTORY_LIMIT = 20
EVENTS_LIMIT = 10


class GetAccountDetailsUseCase:
    """Account with its 20 most recent login attempts and 10 most recent events"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, account_id: UUID) -> Result[AccountDetailsResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            attempts = await self.uow.login_attempts.get_recent_by_account(
                account_id, limit=LOGIN_HISTORY_LIMIT
            )
            events = await self.uow.suspicious_events.get_recent_by_account(
                account_id, limit=EVENTS_LIMIT
            )

            return Return.ok(
                AccountDetailsResponse(
                    account=AccountView.from_entity(account),
                    login_history=[LoginAttemptView.from_entity(a) for a in attempts],
                    suspicious_events=[SuspiciousEventView.from_entity(e) for e in events],
                )
            )

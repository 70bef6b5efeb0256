from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AccountProfileResponse


class GetCurrentAccountUseCase:
    """Resolve the session's account to its profile"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, account_id: UUID) -> Result[AccountProfileResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            return Return.ok(
                AccountProfileResponse(
                    id=str(account.id),
                    email=account.email,
                    first_name=account.first_name,
                    last_name=account.last_name,
                    is_locked=account.is_locked,
                    lock_until=account.lock_until,
                    last_login_at=account.last_login_at,
                    last_login_ip=account.last_login_ip,
                    last_login_city=account.last_login_city,
                    last_login_country=account.last_login_country,
                    created_at=account.created_at,
                )
            )

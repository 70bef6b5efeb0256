"""
Use Case: Unlock Account

Operator override that lifts an account lock before it lapses.
"""

import logging
from uuid import UUID

from src.app.services.counter_store import ICounterStore, user_attempts_key
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Error, Result, Return
from .dtos import AccountView

logger = logging.getLogger(__name__)


class UnlockAccountUseCase:
    """
    Unlock an account.

    Business Logic:
    1. Validate account exists
    2. Clear lock state and the failed-attempt count
    3. Reset the per-email velocity counter so the next failure does not
       re-lock immediately
    4. Commit and return the account

    Idempotent: unlocking an unlocked account succeeds.
    """

    def __init__(self, uow: UnitOfWork, counters: ICounterStore):
        self.uow = uow
        self.counters = counters

    async def execute(self, account_id: UUID) -> Result[AccountView]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            account.unlock()
            account.failed_attempts = 0
            account.updated_at = utcnow()
            account = await self.uow.accounts.update(account)

            await self.uow.commit()

        await self.counters.delete(user_attempts_key(account.email))
        logger.info(f"Account {account_id} unlocked by administrator")
        return Return.ok(AccountView.from_entity(account))

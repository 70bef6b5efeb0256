import logging

import bcrypt

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Account
from src.libs.result import Error, Result, Return
from .register_dto import RegisterCommand, RegisterResponse

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Normalize email (trimmed, lower-cased) and reject duplicates
    2. Hash password with bcrypt cost factor 12
    3. Create Account with empty device/location history
    4. Commit and return the account
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        email = command.email.strip().lower()

        async with self.uow:
            existing = await self.uow.accounts.get_by_email(email)
            if existing:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            password_hash = bcrypt.hashpw(
                command.password.encode("utf-8"), bcrypt.gensalt(12)
            )

            account = Account(
                email=email,
                password_hash=password_hash.decode("utf-8"),
                first_name=command.first_name.strip(),
                last_name=command.last_name.strip(),
            )
            account = await self.uow.accounts.create(account)

            await self.uow.commit()

        logger.info(f"Account registered: {account.id}")
        return Return.ok(
            RegisterResponse(
                id=str(account.id),
                email=account.email,
                first_name=account.first_name,
                last_name=account.last_name,
            )
        )

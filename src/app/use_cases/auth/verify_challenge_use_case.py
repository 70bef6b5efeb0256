"""
Verify Challenge Use Case

Completes a step-up login by checking the one-time code sent for a
warning-level login attempt.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.api.utils.jwt import generate_jwt
from src.app.services.auth_policy import AuthPolicy
from src.app.services.challenge_manager import ChallengeManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import LoginStatus
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo, VerifyChallengeCommand, VerifyChallengeResponse
from .trusted_login import record_trusted_login

logger = logging.getLogger(__name__)


def _not_found() -> Result:
    return Return.err(
        Error("CHALLENGE_NOT_FOUND", "Verification code not found or expired")
    )


class VerifyChallengeUseCase:
    """
    Use case for step-up verification.

    Business Rules:
    - Only an otp_pending attempt can be verified; anything else reports
      CHALLENGE_NOT_FOUND and changes nothing
    - Wrong codes consume an attempt (persisted even though the call fails)
    - A verified attempt moves to otp_verified exactly once and gets the
      same history updates as a safe login
    - An account locked since the challenge was issued cannot complete it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        policy: Optional[AuthPolicy] = None,
        challenge_manager: Optional[ChallengeManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.policy = policy or AuthPolicy()
        self.challenge_manager = challenge_manager or ChallengeManager(
            length=self.policy.otp_length,
            ttl_seconds=self.policy.otp_ttl_seconds,
            max_attempts=self.policy.otp_max_attempts,
        )
        self.clock = clock

    async def execute(
        self, command: VerifyChallengeCommand
    ) -> Result[VerifyChallengeResponse]:
        """
        Execute verify challenge use case.

        Returns:
            Result with VerifyChallengeResponse, or Error(CHALLENGE_NOT_FOUND |
            CHALLENGE_EXHAUSTED | INVALID_CODE | INVALID_CREDENTIALS)
        """
        try:
            attempt_id = UUID(command.login_attempt_id)
        except ValueError:
            return _not_found()

        now = self.clock()

        async with self.uow:
            attempt = await self.uow.login_attempts.get_by_id(attempt_id)
            if (
                attempt is None
                or attempt.account_id is None
                or attempt.status != LoginStatus.otp_pending
            ):
                return _not_found()

            account = await self.uow.accounts.get_by_id(attempt.account_id)
            if account is None:
                return _not_found()

            if account.lock_active(now):
                logger.warning(
                    f"Step-up verification refused for locked account {account.id}"
                )
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            verification = await self.challenge_manager.verify(
                self.uow.challenges, attempt.id, command.code, now
            )
            if verification.is_err():
                # Attempt counter / exhausted challenge deletion must stick
                await self.uow.commit()
                return verification

            attempt.status = LoginStatus.otp_verified
            attempt.otp_verified = True
            await self.uow.login_attempts.update(attempt)
            account = await record_trusted_login(self.uow, account, attempt, verified=True)

            await self.uow.commit()

        session_token = generate_jwt(
            account.id, account.email, self.policy.session_expire_minutes
        )
        logger.info(f"Step-up verification succeeded for account {account.id}")

        return Return.ok(
            VerifyChallengeResponse(
                session_token=session_token,
                risk_score=attempt.risk_score,
                risk_level=attempt.risk_level.value,
                login_attempt_id=str(attempt.id),
                account=AccountInfo.from_account(account),
            )
        )

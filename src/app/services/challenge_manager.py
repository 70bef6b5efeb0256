"""
One-Time-Code Challenge Manager

Issues and verifies the step-up codes sent to account owners when a login
scores in the warning band.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from uuid import UUID

from src.app.repositories.challenge_repository import IChallengeRepository
from src.domain.entities import Account, Challenge, LoginAttempt
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


def hash_code(code: str) -> str:
    return hashlib.sha256(code.encode()).hexdigest()


class ChallengeManager:
    """
    Business Rules:
    - Codes are uniform random digits (leading zeros allowed) from `secrets`
    - Only the SHA-256 hash of a code is persisted
    - A challenge expires ttl_seconds after issue and is then treated as absent
    - Once max_attempts wrong codes were submitted the challenge is deleted,
      whatever the next submitted code is
    """

    def __init__(self, length: int = 6, ttl_seconds: int = 600, max_attempts: int = 3):
        self.length = length
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts

    def generate_code(self) -> str:
        return str(secrets.randbelow(10**self.length)).zfill(self.length)

    async def issue(
        self,
        challenges: IChallengeRepository,
        login_attempt: LoginAttempt,
        account: Account,
        now: datetime,
    ) -> str:
        """Persist a challenge for the login attempt and return the plaintext code"""
        code = self.generate_code()
        challenge = Challenge(
            account_id=account.id,
            login_attempt_id=login_attempt.id,
            email=account.email,
            code_hash=hash_code(code),
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        await challenges.create(challenge)
        return code

    async def verify(
        self,
        challenges: IChallengeRepository,
        login_attempt_id: UUID,
        code: str,
        now: datetime,
    ) -> Result[Challenge]:
        """
        Check a submitted code.

        Returns:
            Result with the verified Challenge, or Error:
            - CHALLENGE_NOT_FOUND: no challenge or it has expired
            - CHALLENGE_EXHAUSTED: attempts used up (challenge deleted)
            - INVALID_CODE: wrong code, details carry remaining_attempts
        """
        challenge = await challenges.get_active_by_login_attempt(login_attempt_id, now)
        if challenge is None:
            return Return.err(
                Error("CHALLENGE_NOT_FOUND", "Verification code not found or expired")
            )

        if challenge.attempts >= self.max_attempts:
            return await self._exhaust(challenges, challenge)

        # Claim an attempt number before comparing; concurrent guesses each
        # get their own and the ones past the limit are refused
        attempts = await challenges.increment_attempts(challenge)
        if attempts > self.max_attempts:
            return await self._exhaust(challenges, challenge)

        if not hmac.compare_digest(challenge.code_hash, hash_code(code.strip())):
            remaining = max(self.max_attempts - attempts, 0)
            return Return.err(
                Error(
                    "INVALID_CODE",
                    f"Invalid verification code. {remaining} attempt(s) remaining",
                    {"remaining_attempts": remaining},
                )
            )

        challenge.is_verified = True
        await challenges.delete(challenge)
        return Return.ok(challenge)

    @staticmethod
    async def _exhaust(challenges: IChallengeRepository, challenge: Challenge) -> Result:
        await challenges.delete(challenge)
        logger.warning(f"Challenge for login attempt {challenge.login_attempt_id} exhausted")
        return Return.err(
            Error(
                "CHALLENGE_EXHAUSTED",
                "Too many failed verification attempts, please log in again",
            )
        )

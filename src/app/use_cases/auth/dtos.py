"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the login decision flow.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.domain.entities import Account


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    """Credentials plus the network/device context captured by the API layer"""

    email: str
    password: str
    ip: str
    user_agent: str = ""
    accept_language: str = ""
    timestamp: Optional[datetime] = None


class VerifyChallengeCommand(BaseModel):
    login_attempt_id: str
    code: str


# ============================================================================
# Response DTOs
# ============================================================================


class AccountInfo(BaseModel):
    """Account information in authentication responses"""

    id: str
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountInfo":
        return cls(
            id=str(account.id),
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
        )


class LoginSuccessResponse(BaseModel):
    """Safe login: a session is granted"""

    outcome: Literal["success"] = "success"
    message: str = "Login successful"
    session_token: str
    risk_score: int
    risk_level: str
    login_attempt_id: str
    account: AccountInfo


class StepUpRequiredResponse(BaseModel):
    """Warning-level login: a one-time code was sent to the account owner"""

    outcome: Literal["step_up"] = "step_up"
    message: str = "Verification code sent to your email. Please verify to continue."
    requires_step_up: bool = True
    risk_score: int
    risk_level: str
    reasons: List[str]
    reason_descriptions: List[str] = Field(default_factory=list)
    login_attempt_id: str


class LoginBlockedResponse(BaseModel):
    """Critical login: no session, account locked"""

    outcome: Literal["blocked"] = "blocked"
    message: str = (
        "Your account has been locked due to suspicious activity. Please check your email."
    )
    locked: bool = True
    risk_score: int
    risk_level: str
    login_attempt_id: str


LoginResponse = Union[LoginSuccessResponse, StepUpRequiredResponse, LoginBlockedResponse]


class VerifyChallengeResponse(BaseModel):
    """Step-up verified: a session is granted"""

    message: str = "Verification successful. Login confirmed."
    session_token: str
    risk_score: int
    risk_level: str
    login_attempt_id: str
    account: AccountInfo


class AccountProfileResponse(BaseModel):
    """Current account profile (no credential material)"""

    id: str
    email: str
    first_name: str
    last_name: str
    is_locked: bool
    lock_until: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    last_login_city: Optional[str] = None
    last_login_country: Optional[str] = None
    created_at: datetime

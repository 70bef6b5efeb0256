"""
Authentication Use Cases

Registration, the risk-adaptive login decision and step-up verification.
"""

from .register_use_case import RegisterUseCase
from .register_dto import RegisterCommand, RegisterResponse
from .login_use_case import LoginUseCase
from .verify_challenge_use_case import VerifyChallengeUseCase
from .get_current_account_use_case import GetCurrentAccountUseCase
from .dtos import (
    AccountInfo,
    AccountProfileResponse,
    LoginBlockedResponse,
    LoginCommand,
    LoginResponse,
    LoginSuccessResponse,
    StepUpRequiredResponse,
    VerifyChallengeCommand,
    VerifyChallengeResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "VerifyChallengeUseCase",
    "GetCurrentAccountUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "VerifyChallengeCommand",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "LoginSuccessResponse",
    "StepUpRequiredResponse",
    "LoginBlockedResponse",
    "VerifyChallengeResponse",
    "AccountProfileResponse",
    # DTOs - Nested Models
    "AccountInfo",
]

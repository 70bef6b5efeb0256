from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.request_metadata import get_request_metadata
from src.app.services.auth_policy import AuthPolicy
from src.app.services.counter_store import ICounterStore
from src.app.services.geolocation import IGeolocationResolver
from src.app.services.notifier import NotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AccountProfileResponse,
    GetCurrentAccountUseCase,
    LoginBlockedResponse,
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    VerifyChallengeCommand,
    VerifyChallengeResponse,
    VerifyChallengeUseCase,
)
from src.depends import (
    get_auth_policy,
    get_counter_store,
    get_current_account_id,
    get_geolocation_resolver,
    get_notification_dispatcher,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=8, max_length=128, description="Password (min 8 chars)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Register an account.

    Raises:
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )

    use_case = RegisterUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    counters: ICounterStore = Depends(get_counter_store),
    geolocation: IGeolocationResolver = Depends(get_geolocation_resolver),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    Risk-adaptive login.

    Outcomes:
        - 200: session granted (`session_token`)
        - 200: step-up required (`requires_step_up`, `login_attempt_id`)
        - 423 Locked: high-risk login blocked, account locked

    Raises:
        - 401 Unauthorized: Invalid credentials (also unknown/locked account)
        - 429 Too Many Requests: IP temporarily blacklisted
    """
    metadata = get_request_metadata(http_request)
    command = LoginCommand(
        email=request.email,
        password=request.password,
        ip=metadata.ip,
        user_agent=metadata.user_agent,
        accept_language=metadata.accept_language,
    )

    use_case = LoginUseCase(
        uow,
        counters=counters,
        geolocation=geolocation,
        notifications=notifications,
        policy=policy,
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "TOO_MANY_ATTEMPTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    if isinstance(result.value, LoginBlockedResponse):
        return JSONResponse(
            status_code=status.HTTP_423_LOCKED,
            content=result.value.model_dump(mode="json"),
        )

    return result.value


class VerifyOtpRequest(BaseModel):
    """Step-up verification payload"""

    login_attempt_id: str = Field(..., min_length=1, max_length=64)
    code: str = Field(..., min_length=1, max_length=12)


@router.post(
    "/verify-otp", status_code=status.HTTP_200_OK, response_model=VerifyChallengeResponse
)
async def verify_otp(
    request: VerifyOtpRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    Complete a step-up login with the emailed one-time code.

    Raises:
        - 400 Bad Request: INVALID_CODE (details.remaining_attempts)
        - 401 Unauthorized: account locked since the code was issued
        - 404 Not Found: CHALLENGE_NOT_FOUND (missing, expired or already used)
        - 429 Too Many Requests: CHALLENGE_EXHAUSTED
    """
    command = VerifyChallengeCommand(
        login_attempt_id=request.login_attempt_id, code=request.code
    )

    use_case = VerifyChallengeUseCase(uow, policy=policy)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "CHALLENGE_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_CODE":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "CHALLENGE_EXHAUSTED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=AccountProfileResponse)
async def me(
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current account profile.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired session token
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = GetCurrentAccountUseCase(uow)
    result = await use_case.execute(account_id)

    if result.is_err():
        error = result.error
        if error.code == "ACCOUNT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value

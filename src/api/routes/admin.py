"""
Admin API Routes - Security Administration Endpoints

Read access to the login audit trail and security log, plus the operator
actions (resolve event, unlock account).
Authentication is via Admin API Key, not account sessions.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.counter_store import ICounterStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    AccountDetailsResponse,
    AccountView,
    DashboardStatsResponse,
    DashboardStatsUseCase,
    GetAccountDetailsUseCase,
    ListLoginAttemptsUseCase,
    ListSuspiciousEventsUseCase,
    LocationDataResponse,
    LocationDataUseCase,
    LoginAttemptPage,
    ResolveSuspiciousEventUseCase,
    SuspiciousEventPage,
    SuspiciousEventView,
    UnlockAccountUseCase,
)
from src.depends import get_counter_store, get_unit_of_work
from src.domain.entities import RiskLevel, Severity, SuspiciousEventType

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_api_key)],
)


@router.get(
    "/login-attempts", status_code=status.HTTP_200_OK, response_model=LoginAttemptPage
)
async def list_login_attempts(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    risk_level: Optional[RiskLevel] = None,
    country: Optional[str] = None,
    email: Optional[str] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Login attempts, newest first.

    Requires: X-Admin-API-Key header
    """
    use_case = ListLoginAttemptsUseCase(uow)
    result = await use_case.execute(
        page=page, limit=limit, risk_level=risk_level, country=country, email=email
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/suspicious-events",
    status_code=status.HTTP_200_OK,
    response_model=SuspiciousEventPage,
)
async def list_suspicious_events(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    severity: Optional[Severity] = None,
    type: Optional[SuspiciousEventType] = None,
    resolved: Optional[bool] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Suspicious events, newest first.

    Requires: X-Admin-API-Key header
    """
    use_case = ListSuspiciousEventsUseCase(uow)
    result = await use_case.execute(
        page=page, limit=limit, severity=severity, type=type, resolved=resolved
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ResolveEventRequest(BaseModel):
    resolved_by: str = Field(..., min_length=1, max_length=255)


@router.put(
    "/suspicious-events/{event_id}/resolve",
    status_code=status.HTTP_200_OK,
    response_model=SuspiciousEventView,
)
async def resolve_suspicious_event(
    event_id: UUID,
    request: ResolveEventRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Mark a suspicious event as resolved.

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: EVENT_NOT_FOUND
    """
    use_case = ResolveSuspiciousEventUseCase(uow)
    result = await use_case.execute(event_id, request.resolved_by)

    if result.is_err():
        error = result.error
        if error.code == "EVENT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.put(
    "/accounts/{account_id}/unlock",
    status_code=status.HTTP_200_OK,
    response_model=AccountView,
)
async def unlock_account(
    account_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    counters: ICounterStore = Depends(get_counter_store),
):
    """
    Lift an account lock.

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = UnlockAccountUseCase(uow, counters)
    result = await use_case.execute(account_id)

    if result.is_err():
        error = result.error
        if error.code == "ACCOUNT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get(
    "/accounts/{account_id}",
    status_code=status.HTTP_200_OK,
    response_model=AccountDetailsResponse,
)
async def get_account_details(
    account_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Account with recent login history and suspicious events.

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = GetAccountDetailsUseCase(uow)
    result = await use_case.execute(account_id)

    if result.is_err():
        error = result.error
        if error.code == "ACCOUNT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get(
    "/dashboard-stats",
    status_code=status.HTTP_200_OK,
    response_model=DashboardStatsResponse,
)
async def dashboard_stats(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Requires: X-Admin-API-Key header"""
    use_case = DashboardStatsUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/location-data",
    status_code=status.HTTP_200_OK,
    response_model=LocationDataResponse,
)
async def location_data(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Requires: X-Admin-API-Key header"""
    use_case = LocationDataUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value

"""HR/admin authentication routes: login, logout, profile, password change."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session, require_hr, session_cookie
from pulse.api.schemas.base import SuccessResponse
from pulse.api.schemas.hr import (
    AccountSummary,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
)
from pulse.core.auth import session_cookie_options
from pulse.core.config import get_settings
from pulse.domain.services.auth_service import AuthService
from pulse.infrastructure.db.models import HRAccount

logger = structlog.get_logger()
router = APIRouter(tags=["HR authentication"])


@router.post(
    "/hr/login",
    response_model=LoginResponse,
    summary="HR/admin login",
    description="Check credentials and open a cookie session.",
)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> LoginResponse:
    service = AuthService(session)
    account, auth_session = await service.login(email=payload.email, password=payload.password)

    response.set_cookie(
        value=auth_session.token,
        max_age=get_settings().session_ttl_seconds,
        **session_cookie_options(),
    )
    return LoginResponse(account=AccountSummary.model_validate(account))


@router.post("/hr/logout", response_model=SuccessResponse, summary="HR/admin logout")
@router.post("/logout", response_model=SuccessResponse, include_in_schema=False)
async def logout(
    response: Response,
    token: str | None = Depends(session_cookie),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SuccessResponse:
    """Delete the session, if any, and expire the cookie."""
    if token:
        await AuthService(session).delete_session(token)
        await logger.ainfo("logout")

    response.delete_cookie(**session_cookie_options())
    return SuccessResponse()


@router.get("/hr/me", response_model=AccountSummary, summary="Current HR/admin account")
async def me(account: HRAccount = Depends(require_hr)) -> AccountSummary:  # noqa: B008
    return AccountSummary.model_validate(account)


@router.post(
    "/hr/change-password",
    response_model=SuccessResponse,
    summary="Change password",
    description="Change the current account's password and clear the reset flag.",
)
async def change_password(
    payload: ChangePasswordRequest,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SuccessResponse:
    await AuthService(session).change_password(
        account,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return SuccessResponse()

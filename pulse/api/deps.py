from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.auth import SESSION_COOKIE_NAME
from pulse.domain.services.auth_service import AuthService
from pulse.infrastructure.db.models import HRAccount
from pulse.infrastructure.db.session import open_session

session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session from the app's session factory."""
    async for session in open_session(request.app.state.session_factory):
        yield session


def require_account(*, admin_only: bool = False) -> Callable[..., Awaitable[HRAccount]]:
    """Dependency factory resolving the ``hr_session`` cookie to an account.

    Raises 401 for a missing, unknown or expired session and 403 when
    ``admin_only`` is set and the account is not an admin.
    """

    async def dependency(
        token: str | None = Depends(session_cookie),  # noqa: B008
        session: AsyncSession = Depends(get_db_session),  # noqa: B008
    ) -> HRAccount:
        return await AuthService(session).require_account(token, admin_only=admin_only)

    return dependency


require_hr = require_account()
require_admin = require_account(admin_only=True)

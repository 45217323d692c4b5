from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from pulse.core.config import get_settings

SESSION_COOKIE_NAME = "hr_session"
SESSION_TOKEN_BYTES = 32


def generate_session_token() -> str:
    """Return an opaque, unguessable session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def session_expiry(now: datetime | None = None, *, ttl: timedelta | None = None) -> datetime:
    """Absolute expiry for a session created at ``now``."""
    settings = get_settings()
    now = now or datetime.now(UTC)
    return now + (ttl or timedelta(days=settings.session_ttl_days))


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def session_cookie_options() -> dict:
    """Keyword arguments shared by ``set_cookie`` and ``delete_cookie``."""
    settings = get_settings()
    return {
        "key": SESSION_COOKIE_NAME,
        "path": "/",
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
    }

"""
Worker jobs for background housekeeping.

Expired sessions never authenticate, so purging them only keeps the
``sessions`` table small. Nothing depends on this job running.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pulse.core.config import get_settings
from pulse.domain.services.auth_service import AuthService
from pulse.infrastructure.db.session import build_engine, build_session_factory

logger = structlog.get_logger()


def purge_expired_sessions_job() -> dict[str, Any]:
    """Entry point for the rq worker."""
    return asyncio.run(_run_purge())


async def _run_purge() -> dict[str, Any]:
    settings = get_settings()
    engine = build_engine(settings.async_database_url)
    try:
        return await purge_expired_sessions(build_session_factory(engine))
    finally:
        await engine.dispose()


async def purge_expired_sessions(
    session_factory: async_sessionmaker[AsyncSession],
) -> dict[str, Any]:
    async with session_factory() as session:
        try:
            purged = await AuthService(session).purge_expired_sessions()
        except Exception as exc:
            await logger.aexception("session_purge_failed", error=str(exc))
            raise
    return {"status": "completed", "purged": purged}

from __future__ import annotations

from datetime import UTC, datetime

import redis.asyncio as aioredis
import structlog
from fastapi import APIRouter, Depends
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session
from pulse.core.config import get_settings

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_database(session: AsyncSession) -> dict:
    """Check the relational database connection."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except SQLAlchemyError as e:
        await logger.awarning("health_database_error", error_type=type(e).__name__, error=str(e))
        return {"status": "error"}


async def check_redis() -> dict:
    """Check Redis connection."""
    settings = get_settings()
    client = aioredis.from_url(settings.redis_url, socket_connect_timeout=2)
    try:
        await client.ping()
        return {"status": "ok"}
    except (RedisError, OSError) as e:
        await logger.awarning("health_redis_error", error_type=type(e).__name__, error=str(e))
        return {"status": "error"}
    finally:
        await client.aclose()


@router.get("/health", summary="Service health probe")
async def health_check(session: AsyncSession = Depends(get_db_session)) -> dict:  # noqa: B008
    """Return basic service and datastore status information."""
    settings = get_settings()

    database_status = await check_database(session)
    redis_status = await check_redis()

    # Overall status is ok only if all datastores are ok
    overall_status = "ok"
    if database_status.get("status") != "ok" or redis_status.get("status") != "ok":
        overall_status = "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": overall_status,
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "database": database_status,
            "redis": redis_status,
        },
    }
    await logger.ainfo("health_probe", **payload)
    return payload

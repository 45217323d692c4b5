from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog
from redis import Redis
from rq import Queue, Worker

from pulse.core.config import get_settings
from pulse.core.logging import setup_logging
from pulse.workers import jobs

logger = structlog.get_logger()

QUEUE_NAMES: Sequence[str] = ("default",)
REGISTERED_JOBS = {
    "purge_expired_sessions": jobs.purge_expired_sessions_job,
}


async def main() -> None:
    """Bootstrap the worker, wiring queues and job handlers."""
    settings = get_settings()
    setup_logging(settings.log_level)
    redis_connection = Redis.from_url(settings.redis_url)
    logger.info(
        "worker_bootstrap",
        queues=list(QUEUE_NAMES),
        jobs=list(REGISTERED_JOBS.keys()),
    )

    await asyncio.to_thread(_run_worker, redis_connection, QUEUE_NAMES)


def _run_worker(connection: Redis, queue_names: Sequence[str]) -> None:
    """Run the RQ worker in a background thread."""
    queues = [Queue(name, connection=connection) for name in queue_names]
    worker = Worker(queues, connection=connection, name="pulse-worker")
    worker.work(with_scheduler=True)


if __name__ == "__main__":
    asyncio.run(main())

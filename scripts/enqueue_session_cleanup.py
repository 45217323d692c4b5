"""Queue the expired-session purge for the rq worker.

Usage: poetry run python scripts/enqueue_session_cleanup.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Make the pulse package importable when the script runs from any directory
sys.path.insert(0, str(Path(__file__).parent.parent))

from redis import Redis
from rq import Queue

from pulse.core.config import get_settings
from pulse.workers.jobs import purge_expired_sessions_job


def main() -> None:
    settings = get_settings()
    queue = Queue("default", connection=Redis.from_url(settings.redis_url))
    job = queue.enqueue(purge_expired_sessions_job)
    print(f"Queued session cleanup job {job.id}")


if __name__ == "__main__":
    main()

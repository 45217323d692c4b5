from typing import Any

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from pulse.api.routes import health


def test_health_endpoint_returns_service_metadata(test_client: TestClient) -> None:
    response = test_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"]
    assert payload["datastores"]["database"] == {"status": "ok"}
    # Redis is not running under test, so the service reports itself degraded
    assert payload["status"] in ["ok", "degraded"]
    assert payload["datastores"]["redis"] in [{"status": "ok"}, {"status": "error"}]
    assert response.headers["X-Request-ID"]


def test_request_id_is_echoed(test_client: TestClient) -> None:
    response = test_client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_unknown_route_uses_message_shape(test_client: TestClient) -> None:
    response = test_client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"message": "Not found"}


class _BrokenSession:
    async def execute(self, *_: Any) -> None:
        raise OperationalError("SELECT 1", {}, Exception("password authentication failed for user pulse"))


class _UnreachableRedis:
    async def ping(self) -> None:
        raise RedisConnectionError("Error connecting to redis.internal:6379")

    async def aclose(self) -> None:
        return None


async def test_database_failure_reports_status_only() -> None:
    result = await health.check_database(_BrokenSession())  # type: ignore[arg-type]
    assert result == {"status": "error"}


async def test_redis_failure_reports_status_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(health.aioredis, "from_url", lambda *_args, **_kwargs: _UnreachableRedis())

    result = await health.check_redis()

    assert result == {"status": "error"}

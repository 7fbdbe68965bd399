"""Middleware tests: request ID, rate limiting, CORS, error envelope."""

from typing import Any

import pytest
from httpx import AsyncClient

from moneyglow.middleware.logging import mask_address, redact_secrets


class FakePipeline:
    def __init__(self, store: dict[str, int]) -> None:
        self.store = store
        self.ops: list[tuple[str, str]] = []

    def incr(self, key: str) -> None:
        self.ops.append(("incr", key))

    def expire(self, key: str, _seconds: int) -> None:
        self.ops.append(("expire", key))

    async def execute(self) -> list[Any]:
        results: list[Any] = []
        for op, key in self.ops:
            if op == "incr":
                self.store[key] = self.store.get(key, 0) + 1
                results.append(self.store[key])
            else:
                results.append(True)
        return results


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, int] = {}

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self.store)


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    redis = FakeRedis()
    monkeypatch.setattr("moneyglow.middleware.rate_limit.get_redis", lambda: redis)
    return redis


async def test_request_id_generated(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert len(response.headers["x-request-id"]) == 32


async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


async def test_no_rate_limit_without_redis(client: AsyncClient) -> None:
    response = await client.get("/api/levels")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


async def test_rate_limit_headers(client: AsyncClient, fake_redis: FakeRedis) -> None:
    response = await client.get("/api/levels")
    assert response.headers["x-ratelimit-limit"] == "100"
    assert response.headers["x-ratelimit-remaining"] == "99"


async def test_rate_limit_blocks_excess(client: AsyncClient, fake_redis: FakeRedis) -> None:
    for _ in range(100):
        await client.get("/api/levels")
    response = await client.get("/api/levels")
    assert response.status_code == 429
    assert response.headers["retry-after"] == "60"
    assert response.json() == {"detail": "Too many requests. Slow down a little."}


async def test_health_exempt_from_rate_limit(client: AsyncClient, fake_redis: FakeRedis) -> None:
    for _ in range(150):
        assert (await client.get("/health")).status_code == 200
    assert fake_redis.store == {}


async def test_cors_preflight_allows_frontend(client: AsyncClient) -> None:
    response = await client.options(
        "/api/auth/me",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"


async def test_unknown_route_uses_detail_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


async def test_validation_error_envelope(authed_client: AsyncClient) -> None:
    response = await authed_client.post("/api/income", json={"source": "YOUTUBE"})
    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation error"
    assert {tuple(err["loc"]) for err in body["errors"]} >= {("body", "amount"), ("body", "date")}


async def test_cors_exposes_retry_after(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"Origin": "http://localhost:3000"})
    exposed = {h.strip().lower() for h in response.headers["access-control-expose-headers"].split(",")}
    assert {"retry-after", "x-request-id", "x-ratelimit-remaining"} <= exposed


def test_log_processor_redacts_login_secrets() -> None:
    event = redact_secrets(
        None,
        "info",
        {"event": "email_sent", "to": "bea@example.com", "magic_url": "https://x/verify?token=t", "user_id": "u1"},
    )
    assert event == {"event": "email_sent", "to": "b***@example.com", "magic_url": "[redacted]", "user_id": "u1"}


def test_mask_address() -> None:
    assert mask_address("bea@example.com") == "b***@example.com"
    assert mask_address("not-an-address") == "***"

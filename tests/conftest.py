"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import fakeredis
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from redqueue.api.dependencies import get_queue_client
from redqueue.api.main import create_app
from redqueue.client import QueueClient
from redqueue.config import Settings
from redqueue.store.keys import KeyNamespace

# Short lifetime for per-worker records in expiry tests
TEST_WORKER_TTL_SECONDS = 1


@pytest.fixture
def fake_server() -> fakeredis.FakeServer:
    """A private in-memory Redis server per test."""
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def redis_client(fake_server: fakeredis.FakeServer) -> AsyncGenerator[fakeredis.FakeAsyncRedis]:
    """Async Redis client bound to the test server."""
    client = fakeredis.FakeAsyncRedis(server=fake_server, decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def keys() -> KeyNamespace:
    return KeyNamespace()


@pytest.fixture
def queue_client(redis_client, keys: KeyNamespace) -> QueueClient:
    """Queue client with the production key layout and TTL."""
    return QueueClient(redis_client, keys=keys, worker_ttl_seconds=10_000)


@pytest.fixture
def short_ttl_client(redis_client, keys: KeyNamespace) -> QueueClient:
    """Queue client whose per-worker records expire after one second."""
    return QueueClient(redis_client, keys=keys, worker_ttl_seconds=TEST_WORKER_TTL_SECONDS)


@pytest.fixture
def offline_client(fake_server: fakeredis.FakeServer, keys: KeyNamespace) -> QueueClient:
    """Queue client whose server refuses connections."""
    fake_server.connected = False
    redis_client = fakeredis.FakeAsyncRedis(server=fake_server, decode_responses=True)
    return QueueClient(redis_client, keys=keys, worker_ttl_seconds=10_000)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        redis_url="redis://localhost:6379/15",
        log_level="DEBUG",
        log_format="console",
        worker_ttl_seconds=TEST_WORKER_TTL_SECONDS,
        worker_poll_interval_seconds=0.01,
    )


@pytest.fixture
def app(queue_client: QueueClient) -> FastAPI:
    """FastAPI app wired to the test queue client."""
    app = create_app()
    app.dependency_overrides[get_queue_client] = lambda: queue_client
    return app


@pytest_asyncio.fixture
async def http_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_job_payload() -> dict[str, Any]:
    """Create a sample job payload."""
    return {"class": "Send", "args": ["a@b.com"]}

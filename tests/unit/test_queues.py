"""
Unit tests for queue storage.
"""

import fakeredis
import pytest

from redqueue.exceptions import MalformedPayloadError, StoreUnavailableError
from redqueue.store.keys import KeyNamespace
from redqueue.store.queues import QueueStore


class TestQueueStore:
    """Tests for QueueStore."""

    @pytest.fixture
    def store(self, redis_client, keys: KeyNamespace) -> QueueStore:
        return QueueStore(redis_client, keys)

    @pytest.mark.asyncio
    async def test_push_pop_fifo(self, store: QueueStore):
        """Test that items come out in the order they were pushed."""
        items = [{"class": "Job", "args": [i]} for i in range(5)]
        for item in items:
            await store.push("jobs", item)

        popped = [await store.pop("jobs") for _ in items]

        assert popped == items
        assert await store.pop("jobs") is None

    @pytest.mark.asyncio
    async def test_push_returns_length(self, store: QueueStore):
        assert await store.push("jobs", {"a": 1}) == 1
        assert await store.push("jobs", {"a": 2}) == 2

    @pytest.mark.asyncio
    async def test_push_writes_encoded_item_to_tail(self, store: QueueStore, redis_client):
        await store.push("jobs", {"a": 1})
        await store.push("jobs", {"a": 2})

        assert await redis_client.lrange("resque:queue:jobs", 0, -1) == ['{"a":1}', '{"a":2}']

    @pytest.mark.asyncio
    async def test_pop_empty(self, store: QueueStore):
        assert await store.pop("missing") is None

    @pytest.mark.asyncio
    async def test_size(self, store: QueueStore):
        assert await store.size("jobs") == 0
        await store.push("jobs", {"a": 1})
        await store.push("jobs", {"a": 2})
        assert await store.size("jobs") == 2

    @pytest.mark.asyncio
    async def test_push_registers_queue(self, store: QueueStore):
        await store.push("mailer", {"a": 1})
        await store.push("reports", {"a": 1})

        assert await store.queues() == {"mailer", "reports"}

    @pytest.mark.asyncio
    async def test_queue_stays_registered_after_drain(self, store: QueueStore):
        await store.push("mailer", {"a": 1})
        await store.pop("mailer")

        assert await store.size("mailer") == 0
        assert "mailer" in await store.queues()

    @pytest.mark.asyncio
    async def test_registration_survives_lost_cache(self, store: QueueStore, redis_client, keys):
        """Test that registration does not depend on the per-instance cache."""
        await store.push("mailer", {"a": 1})
        await redis_client.delete(keys.queues())

        other = QueueStore(redis_client, keys)
        await other.push("mailer", {"a": 2})

        assert await other.queues() == {"mailer"}

    @pytest.mark.asyncio
    async def test_watched_queues_is_per_instance(self, store: QueueStore, redis_client, keys):
        await store.push("mailer", {"a": 1})
        other = QueueStore(redis_client, keys)

        assert store.watched_queues == {"mailer": True}
        assert other.watched_queues == {}

    @pytest.mark.asyncio
    async def test_peek_single(self, store: QueueStore):
        await store.push("jobs", {"a": 1})
        await store.push("jobs", {"a": 2})

        assert await store.peek("jobs") == {"a": 1}
        assert await store.peek("jobs", 1) == {"a": 2}
        assert await store.peek("jobs", 5) is None

    @pytest.mark.asyncio
    async def test_peek_range(self, store: QueueStore):
        for i in range(5):
            await store.push("jobs", {"a": i})

        assert await store.peek("jobs", 1, 3) == [{"a": 1}, {"a": 2}, {"a": 3}]
        assert await store.peek("jobs", 3, 10) == [{"a": 3}, {"a": 4}]
        assert await store.peek("jobs", 10, 3) == []

    @pytest.mark.asyncio
    async def test_peek_does_not_mutate(self, store: QueueStore):
        for i in range(3):
            await store.push("jobs", {"a": i})

        await store.peek("jobs")
        await store.peek("jobs", 0, 3)

        assert await store.size("jobs") == 3

    @pytest.mark.asyncio
    async def test_pending(self, store: QueueStore):
        await store.push("a", {"x": 1})
        await store.push("a", {"x": 2})
        await store.push("b", {"x": 3})

        assert await store.pending() == 3

    @pytest.mark.asyncio
    async def test_pop_malformed(self, store: QueueStore, redis_client):
        await redis_client.rpush("resque:queue:jobs", "{not json")

        with pytest.raises(MalformedPayloadError):
            await store.pop("jobs")

    @pytest.mark.asyncio
    async def test_pop_invalid_utf8(self, store: QueueStore, fake_server):
        """Test that bytes the client cannot decode are a codec failure."""
        raw_client = fakeredis.FakeAsyncRedis(server=fake_server)
        await raw_client.rpush("resque:queue:jobs", b"\xff\xfe{")

        with pytest.raises(MalformedPayloadError) as exc_info:
            await store.pop("jobs")

        assert exc_info.value.data == b"\xff\xfe{"
        assert await raw_client.llen("resque:queue:jobs") == 0
        await raw_client.aclose()

    @pytest.mark.asyncio
    async def test_peek_invalid_utf8(self, store: QueueStore, fake_server):
        raw_client = fakeredis.FakeAsyncRedis(server=fake_server)
        await raw_client.rpush("resque:queue:jobs", b"\xff\xfe{", b"\xff")

        with pytest.raises(MalformedPayloadError):
            await store.peek("jobs")
        with pytest.raises(MalformedPayloadError):
            await store.peek("jobs", 0, 2)

        assert await raw_client.llen("resque:queue:jobs") == 2
        await raw_client.aclose()

    @pytest.mark.asyncio
    async def test_store_unavailable(self, offline_client):
        with pytest.raises(StoreUnavailableError) as exc_info:
            await offline_client.queue_store.pop("jobs")

        assert exc_info.value.primitive == "pop"

"""
Queue storage.

Each queue is a Redis list: producers RPUSH to the tail, consumers LPOP
from the head. Queue names are also recorded in a discovery set the first
time anything is pushed to them and are never removed from it.
"""

import logging
from typing import Any

import redis.asyncio as redis

from redqueue.store.codec import decode, encode
from redqueue.store.connection import store_operation
from redqueue.store.keys import KeyNamespace

logger = logging.getLogger(__name__)


class QueueStore:
    """
    Push, pop and inspect named FIFO queues.

    The ``watched_queues`` mapping remembers which names this instance has
    already registered so repeated pushes skip the SADD. It is only an
    optimisation: SADD is idempotent in the store.
    """

    def __init__(self, client: redis.Redis, keys: KeyNamespace):
        """
        Initialize the store.

        Args:
            client: The async Redis client.
            keys: Key namespace for queue keys.
        """
        self._client = client
        self._keys = keys
        self.watched_queues: dict[str, bool] = {}

    @store_operation("push")
    async def push(self, queue: str, item: Any) -> int:
        """
        Append an item to the tail of a queue.

        Args:
            queue: Queue name.
            item: Any encodable value.

        Returns:
            The queue length after the push.
        """
        data = encode(item)
        await self.watch_queue(queue)
        length = await self._client.rpush(self._keys.queue(queue), data)
        logger.debug("Pushed item", extra={"queue": queue, "size": length})
        return length

    @store_operation("pop")
    async def pop(self, queue: str) -> Any | None:
        """
        Remove and return the item at the head of a queue.

        Returns:
            The decoded item, or None if the queue is empty.
        """
        return decode(await self._client.lpop(self._keys.queue(queue)))

    @store_operation("size")
    async def size(self, queue: str) -> int:
        """Current number of items in a queue."""
        return int(await self._client.llen(self._keys.queue(queue)))

    @store_operation("peek")
    async def peek(self, queue: str, start: int = 0, count: int = 1) -> Any:
        """
        Read items without removing them.

        Args:
            queue: Queue name.
            start: Index of the first item (0 is the head).
            count: Number of items to read.

        Returns:
            With ``count == 1`` the single item or None; otherwise a list
            of the items in ``[start, start + count - 1]``, empty when the
            range is out of bounds.
        """
        key = self._keys.queue(queue)
        if count == 1:
            return decode(await self._client.lindex(key, start))
        if count < 1:
            return []
        items = await self._client.lrange(key, start, start + count - 1)
        return [decode(item) for item in items]

    @store_operation("queues")
    async def queues(self) -> set[str]:
        """All queue names ever pushed to."""
        return set(await self._client.smembers(self._keys.queues()))

    @store_operation("watch_queue")
    async def watch_queue(self, queue: str) -> None:
        """Register a queue name in the discovery set."""
        if self.watched_queues.get(queue):
            return
        await self._client.sadd(self._keys.queues(), str(queue))
        self.watched_queues[queue] = True
        logger.info("Registered queue", extra={"queue": queue})

    async def pending(self) -> int:
        """Total number of items across every known queue."""
        total = 0
        for queue in await self.queues():
            total += await self.size(queue)
        return total

"""
Atomic batches of store mutations.

A batch is a MULTI/EXEC pipeline: commands are queued client-side and sent
together on exit, and the server applies them without interleaving any
other client's commands. Observers see all of a batch or none of it.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis
from redis.asyncio.client import Pipeline

from redqueue.exceptions import StoreUnavailableError
from redqueue.store.connection import STORE_ERRORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EphemeralRecord:
    """
    A key that must never exist without an expiry.

    Used for every per-worker record so that state left behind by a
    crashed worker disappears on its own.
    """

    key: str
    ttl_seconds: int


class AtomicBatch:
    """Commands queued on a transactional pipeline."""

    def __init__(self, pipeline: Pipeline):
        self._pipeline = pipeline
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def _queue(self, command: str, *args: Any) -> "AtomicBatch":
        getattr(self._pipeline, command)(*args)
        self._size += 1
        return self

    def set(self, key: str, value: Any) -> "AtomicBatch":
        return self._queue("set", key, value)

    def incr(self, key: str) -> "AtomicBatch":
        return self._queue("incr", key)

    def sadd(self, key: str, *members: str) -> "AtomicBatch":
        return self._queue("sadd", key, *members)

    def expire(self, key: str, seconds: int) -> "AtomicBatch":
        return self._queue("expire", key, seconds)

    def set_ephemeral(self, record: EphemeralRecord, value: Any) -> "AtomicBatch":
        """Write a value together with its expiry."""
        self.set(record.key, value)
        return self.expire(record.key, record.ttl_seconds)

    def incr_ephemeral(self, record: EphemeralRecord) -> "AtomicBatch":
        """Increment a counter and refresh its expiry."""
        self.incr(record.key)
        return self.expire(record.key, record.ttl_seconds)


@asynccontextmanager
async def atomic_batch(
    client: redis.Redis,
    primitive: str = "batch",
) -> AsyncIterator[AtomicBatch]:
    """
    Context manager applying queued commands as one transaction.

    Nothing is sent if the block raises.

    Args:
        client: The Redis client.
        primitive: Operation name reported if the store is unreachable.

    Yields:
        AtomicBatch: Collector for the commands to apply.

    Example:
        async with atomic_batch(client) as batch:
            batch.sadd(keys.workers(), worker_id)
            batch.set_ephemeral(record, now)
    """
    async with client.pipeline(transaction=True) as pipeline:
        batch = AtomicBatch(pipeline)
        yield batch
        if not len(batch):
            return
        try:
            await pipeline.execute()
        except STORE_ERRORS as e:
            logger.error(
                "Atomic batch failed",
                extra={"primitive": primitive, "commands": len(batch), "error": str(e)},
            )
            raise StoreUnavailableError(primitive, str(e)) from e

"""
Worker registry.

Known workers are members of a set. Liveness is tracked separately by two
TTL-bounded records per worker: the "started" timestamp and the current
status record. Set membership outlives both; a worker whose records have
expired is still listed but is neither started nor working.
"""

import logging
from datetime import UTC, datetime

import redis.asyncio as redis

from redqueue.constants import WorkerState
from redqueue.exceptions import PayloadShapeError
from redqueue.store.batch import EphemeralRecord, atomic_batch
from redqueue.store.codec import decode_model
from redqueue.store.connection import store_operation
from redqueue.store.keys import KeyNamespace
from redqueue.store.stats import StatsTracker
from redqueue.types.job import StatusRecord

logger = logging.getLogger(__name__)


class WorkerRegistry:
    """
    Registration and liveness queries for workers.
    """

    def __init__(
        self,
        client: redis.Redis,
        keys: KeyNamespace,
        ttl_seconds: int,
        stats: StatsTracker,
    ):
        self._client = client
        self._keys = keys
        self._ttl_seconds = ttl_seconds
        self._stats = stats

    def started_record(self, worker_id: str) -> EphemeralRecord:
        return EphemeralRecord(self._keys.worker_started(worker_id), self._ttl_seconds)

    async def add_worker(self, worker_id: str) -> None:
        """
        Register a worker and record when it started.

        Membership and the expiring started record are written in one
        atomic batch.
        """
        now = datetime.now(UTC).isoformat()
        async with atomic_batch(self._client, "add_worker") as batch:
            batch.sadd(self._keys.workers(), str(worker_id))
            batch.set_ephemeral(self.started_record(worker_id), now)
        logger.info("Worker registered", extra={"worker_id": worker_id})

    @store_operation("remove_worker")
    async def remove_worker(self, worker_id: str) -> None:
        """
        Unregister a worker.

        Counters go first so a worker never shows up in listings without
        its stats. The steps are not atomic; every per-worker record has a
        TTL, so a removal interrupted halfway cleans itself up.
        """
        await self._stats.clear_processed_for(worker_id)
        await self._stats.clear_failed_for(worker_id)
        await self._client.delete(self._keys.worker_started(worker_id))
        await self._client.srem(self._keys.workers(), str(worker_id))
        logger.info("Worker unregistered", extra={"worker_id": worker_id})

    @store_operation("workers")
    async def workers(self) -> set[str]:
        """All known worker ids."""
        return set(await self._client.smembers(self._keys.workers()))

    @store_operation("is_worker")
    async def is_worker(self, worker_id: str) -> bool:
        """Whether a worker id is in the known-workers set."""
        return bool(await self._client.sismember(self._keys.workers(), str(worker_id)))

    @store_operation("working")
    async def working(self) -> set[str]:
        """
        Ids of known workers that currently have a live status record.

        Fetches every status key in one MGET and keeps the ids whose value
        came back.
        """
        worker_ids = sorted(await self._client.smembers(self._keys.workers()))
        if not worker_ids:
            return set()
        values = await self._client.mget([self._keys.worker(w) for w in worker_ids])
        return {
            worker_id
            for worker_id, value in zip(worker_ids, values)
            if value is not None
        }

    @store_operation("worker_state")
    async def worker_state(self, worker_id: str) -> WorkerState:
        """WORKING if the worker has a live status record, else IDLE."""
        exists = await self._client.exists(self._keys.worker(worker_id))
        return WorkerState.WORKING if exists else WorkerState.IDLE

    @store_operation("worker_started")
    async def worker_started(self, worker_id: str) -> datetime | None:
        """
        When the worker registered, or None once the record expired.

        Raises:
            PayloadShapeError: If the stored value is not an ISO 8601 timestamp.
        """
        value = await self._client.get(self._keys.worker_started(worker_id))
        if value is None:
            return None
        try:
            return datetime.fromisoformat(value)
        except ValueError as e:
            raise PayloadShapeError("datetime", str(e)) from e

    @store_operation("worker_status")
    async def worker_status(self, worker_id: str) -> StatusRecord | None:
        """The decoded status record of a worker, if it is working."""
        return decode_model(
            await self._client.get(self._keys.worker(worker_id)),
            StatusRecord,
        )

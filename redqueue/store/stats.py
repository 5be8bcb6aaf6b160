"""
Worker status and processing statistics.

The global processed counter is permanent. Per-worker counters and status
records expire after the worker TTL so that identities of workers that
went away are reclaimed without a cleanup job. The global failure count is
the length of the failed queue, where each failed attempt leaves a record.
"""

import logging
from datetime import UTC, datetime

import redis.asyncio as redis

from redqueue.constants import FAILED_QUEUE, STAT_FAILED, STAT_PROCESSED
from redqueue.store.batch import EphemeralRecord, atomic_batch
from redqueue.store.codec import encode, validate
from redqueue.store.connection import store_operation
from redqueue.store.keys import KeyNamespace
from redqueue.types.job import FailureRecord, JobPayload, StatusRecord

logger = logging.getLogger(__name__)


class StatsTracker:
    """
    Status records and processed/failed counters.
    """

    def __init__(self, client: redis.Redis, keys: KeyNamespace, ttl_seconds: int):
        self._client = client
        self._keys = keys
        self._ttl_seconds = ttl_seconds

    def status_record(self, worker_id: str) -> EphemeralRecord:
        return EphemeralRecord(self._keys.worker(worker_id), self._ttl_seconds)

    def counter_record(self, kind: str, worker_id: str) -> EphemeralRecord:
        return EphemeralRecord(self._keys.stat(kind, worker_id), self._ttl_seconds)

    # Status

    async def set_worker_status(
        self,
        worker_id: str,
        queue: str,
        payload: JobPayload | dict,
    ) -> StatusRecord:
        """
        Record that a worker is about to run a job.

        The record is written with its expiry in one atomic batch, so a
        status is never visible without a TTL.

        Returns:
            The record that was written.

        Raises:
            PayloadShapeError: If the payload is not a job payload.
        """
        record = validate(
            {"queue": queue, "run_at": datetime.now(UTC), "payload": payload},
            StatusRecord,
        )
        async with atomic_batch(self._client, "set_worker_status") as batch:
            batch.set_ephemeral(self.status_record(worker_id), encode(record))
        return record

    @store_operation("clear_worker_status")
    async def clear_worker_status(self, worker_id: str) -> None:
        """Mark a worker idle without waiting for the TTL."""
        await self._client.delete(self._keys.worker(worker_id))

    # Processed

    async def incr_processed(self, worker_id: str | None = None) -> None:
        """
        Count one processed job attempt, whatever its outcome.

        Always increments the global counter; with a worker id the
        worker's counter is incremented and its TTL refreshed in the same
        batch.
        """
        async with atomic_batch(self._client, "incr_processed") as batch:
            batch.incr(self._keys.stat(STAT_PROCESSED))
            if worker_id is not None:
                batch.incr_ephemeral(self.counter_record(STAT_PROCESSED, worker_id))

    @store_operation("processed")
    async def processed(self, worker_id: str | None = None) -> int:
        """Global or per-worker processed count. Missing counters read 0."""
        value = await self._client.get(self._keys.stat(STAT_PROCESSED, worker_id))
        return int(value or 0)

    @store_operation("clear_processed_for")
    async def clear_processed_for(self, worker_id: str) -> None:
        await self._client.delete(self._keys.stat(STAT_PROCESSED, worker_id))

    # Failed

    async def incr_failed(self, worker_id: str | None = None) -> None:
        """
        Count one failed attempt for a worker.

        Without a worker id this does nothing: the global count comes from
        the failed queue.
        """
        if worker_id is None:
            return
        async with atomic_batch(self._client, "incr_failed") as batch:
            batch.incr_ephemeral(self.counter_record(STAT_FAILED, worker_id))

    @store_operation("failed")
    async def failed(self, worker_id: str | None = None) -> int:
        """Per-worker failed count, or the failed queue length."""
        if worker_id is None:
            return int(await self._client.llen(self._keys.queue(FAILED_QUEUE)))
        value = await self._client.get(self._keys.stat(STAT_FAILED, worker_id))
        return int(value or 0)

    @store_operation("clear_failed_for")
    async def clear_failed_for(self, worker_id: str) -> None:
        await self._client.delete(self._keys.stat(STAT_FAILED, worker_id))

    @store_operation("record_failure")
    async def record_failure(self, failure: FailureRecord) -> int:
        """
        Keep a failed attempt on the failed queue.

        The failed queue is not registered in the queue discovery set.

        Returns:
            The failed queue length after the push.
        """
        length = await self._client.rpush(self._keys.queue(FAILED_QUEUE), encode(failure))
        logger.warning(
            "Recorded job failure",
            extra={
                "queue": failure.queue,
                "job_class": failure.payload.job_class,
                "worker_id": failure.worker,
                "exception": failure.exception,
            },
        )
        return length

"""
Queue client.

The single entry point producers, workers and the API use. It owns no
durable state: everything lives in Redis, and a client can be dropped and
recreated at any time.
"""

import logging
from datetime import datetime
from typing import Any

import redis.asyncio as redis

from redqueue.config import get_settings
from redqueue.constants import SPAN_ENQUEUE_JOB, SPAN_RESERVE_JOB, WorkerState
from redqueue.job import Job
from redqueue.observability.metrics import get_metrics
from redqueue.observability.tracing import start_span
from redqueue.store.connection import create_client, describe_server
from redqueue.store.keys import KeyNamespace
from redqueue.store.queues import QueueStore
from redqueue.store.stats import StatsTracker
from redqueue.store.workers import WorkerRegistry
from redqueue.types.job import (
    ClientInfo,
    FailureRecord,
    JobPayload,
    StatusRecord,
)

logger = logging.getLogger(__name__)


def job_class_name(job_class: str | type) -> str:
    """Identifier stored for a job class given as a name or a class."""
    if isinstance(job_class, str):
        return job_class
    return job_class.__qualname__


class QueueClient:
    """
    Queue, worker registry and stats operations over one Redis handle.

    One client per event loop. The underlying redis client pools its own
    connections and may be shared by tasks on that loop.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        keys: KeyNamespace | None = None,
        worker_ttl_seconds: int | None = None,
    ):
        """
        Initialize the client.

        Args:
            redis_client: The async Redis client.
            keys: Key layout. Defaults to the configured root and delimiter.
            worker_ttl_seconds: Lifetime of per-worker records.
        """
        settings = get_settings()

        self.redis = redis_client
        self.keys = keys or KeyNamespace(settings.key_root, settings.key_delimiter)
        self.worker_ttl_seconds = worker_ttl_seconds or settings.worker_ttl_seconds

        self.queue_store = QueueStore(self.redis, self.keys)
        self.stats = StatsTracker(self.redis, self.keys, self.worker_ttl_seconds)
        self.registry = WorkerRegistry(
            self.redis,
            self.keys,
            self.worker_ttl_seconds,
            self.stats,
        )

    @classmethod
    def from_settings(cls) -> "QueueClient":
        """Create a client with its own connection from configuration."""
        return cls(create_client())

    async def close(self) -> None:
        await self.redis.aclose()

    @property
    def server(self) -> str:
        return describe_server(self.redis)

    def __str__(self) -> str:
        return f"Queue client connected to {self.server}"

    # Queues

    async def push(self, queue: str, item: Any) -> int:
        return await self.queue_store.push(queue, item)

    async def pop(self, queue: str) -> Any | None:
        return await self.queue_store.pop(queue)

    async def size(self, queue: str) -> int:
        return await self.queue_store.size(queue)

    async def peek(self, queue: str, start: int = 0, count: int = 1) -> Any:
        return await self.queue_store.peek(queue, start, count)

    async def queues(self) -> set[str]:
        return await self.queue_store.queues()

    async def pending(self) -> int:
        return await self.queue_store.pending()

    # Jobs

    async def enqueue(self, queue: str, job_class: str | type, *args: Any) -> int:
        """
        Push a job onto a queue.

        Args:
            queue: Queue name.
            job_class: Job type identifier, or a class whose name is used.
            *args: Arguments passed to the job.

        Returns:
            The queue length after the push.
        """
        payload = JobPayload(job_class=job_class_name(job_class), args=list(args))

        with start_span(SPAN_ENQUEUE_JOB, queue=queue, job_class=payload.job_class):
            length = await self.push(queue, payload)

        get_metrics().record_job_enqueued(queue, payload.job_class)
        logger.info(
            "Enqueued job",
            extra={"queue": queue, "job_class": payload.job_class, "size": length},
        )
        return length

    async def reserve(self, queue: str) -> Job | None:
        """
        Take the next job from a queue.

        Returns:
            The job envelope, or None when there is nothing to do.
        """
        with start_span(SPAN_RESERVE_JOB, queue=queue) as span:
            job = await Job.reserve(self, queue)
            span.set_attribute("found", job is not None)
        if job is not None:
            get_metrics().record_job_reserved(queue)
        return job

    async def record_failure(self, failure: FailureRecord) -> int:
        return await self.stats.record_failure(failure)

    # Workers

    async def add_worker(self, worker_id: str) -> None:
        await self.registry.add_worker(worker_id)
        get_metrics().record_worker_registered()

    async def remove_worker(self, worker_id: str) -> None:
        await self.registry.remove_worker(worker_id)

    async def workers(self) -> set[str]:
        return await self.registry.workers()

    async def is_worker(self, worker_id: str) -> bool:
        return await self.registry.is_worker(worker_id)

    async def working(self) -> set[str]:
        return await self.registry.working()

    async def worker_state(self, worker_id: str) -> WorkerState:
        return await self.registry.worker_state(worker_id)

    async def worker_started(self, worker_id: str) -> datetime | None:
        return await self.registry.worker_started(worker_id)

    async def worker_status(self, worker_id: str) -> StatusRecord | None:
        return await self.registry.worker_status(worker_id)

    async def set_worker_status(
        self,
        worker_id: str,
        queue: str,
        payload: JobPayload | dict,
    ) -> StatusRecord:
        return await self.stats.set_worker_status(worker_id, queue, payload)

    async def clear_worker_status(self, worker_id: str) -> None:
        await self.stats.clear_worker_status(worker_id)

    # Stats

    async def incr_processed(self, worker_id: str | None = None) -> None:
        await self.stats.incr_processed(worker_id)

    async def processed(self, worker_id: str | None = None) -> int:
        return await self.stats.processed(worker_id)

    async def clear_processed_for(self, worker_id: str) -> None:
        await self.stats.clear_processed_for(worker_id)

    async def incr_failed(self, worker_id: str | None = None) -> None:
        await self.stats.incr_failed(worker_id)

    async def failed(self, worker_id: str | None = None) -> int:
        return await self.stats.failed(worker_id)

    async def clear_failed_for(self, worker_id: str) -> None:
        await self.stats.clear_failed_for(worker_id)

    async def info(self) -> ClientInfo:
        """Snapshot of queues, workers and counters."""
        queues = await self.queues()
        pending = 0
        metrics = get_metrics()
        for queue in queues:
            depth = await self.size(queue)
            metrics.update_queue_depth(queue, depth)
            pending += depth

        return ClientInfo(
            pending=pending,
            processed=await self.processed(),
            queues=len(queues),
            workers=len(await self.workers()),
            working=len(await self.working()),
            failed=await self.failed(),
            servers=[self.server],
        )

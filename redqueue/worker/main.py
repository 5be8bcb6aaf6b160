"""
Worker process for executing jobs.

The worker registers itself, polls its queues in order, runs one job at a
time and reports status and stats around each job. It unregisters when it
stops.
"""

import asyncio
import logging
import os
import signal
import socket
import time

from redqueue.client import QueueClient
from redqueue.config import get_settings
from redqueue.constants import SPAN_EXECUTE_JOB
from redqueue.exceptions import CodecError, RedqueueError, StoreUnavailableError
from redqueue.job import Job
from redqueue.observability.logging import bind_context, clear_context, setup_logging
from redqueue.observability.metrics import get_metrics, setup_metrics
from redqueue.observability.tracing import setup_tracing, start_span
from redqueue.store.connection import close_redis, init_redis
from redqueue.types.job import JobResult
from redqueue.worker.handlers import execute_job

logger = logging.getLogger(__name__)


def default_worker_id(queues: list[str]) -> str:
    """Conventional worker id: host, process id and the queue list."""
    return f"{socket.gethostname()}:{os.getpid()}:{','.join(queues)}"


class Worker:
    """
    Job worker that polls for and executes jobs.

    Features:
    - Queues polled in the given order, first job found wins
    - TTL-bounded status record while a job runs
    - Processed/failed stats per attempt, failure records on the failed queue
    - Backoff on empty queues and on store errors
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        client: QueueClient,
        queues: list[str] | None = None,
        worker_id: str | None = None,
        poll_interval: float | None = None,
    ):
        """
        Initialize the worker.

        Args:
            client: Queue client to work through.
            queues: Queue names to poll, highest priority first.
            worker_id: Unique worker identifier. Defaults to host:pid:queues.
            poll_interval: Seconds to wait when every queue is empty.
        """
        settings = get_settings()

        self.client = client
        self.queues = list(queues or settings.worker_queues)
        self.worker_id = worker_id or default_worker_id(self.queues)
        self.poll_interval = (
            poll_interval
            if poll_interval is not None
            else settings.worker_poll_interval_seconds
        )

        self._running = False
        self._metrics = get_metrics()

    def __str__(self) -> str:
        return self.worker_id

    async def start(self) -> None:
        """Register, then poll until stopped."""
        logger.info(
            "Worker starting",
            extra={"worker_id": self.worker_id, "queues": self.queues},
        )
        bind_context(worker_id=self.worker_id)

        await self.client.add_worker(self.worker_id)
        self._running = True

        try:
            while self._running:
                try:
                    processed = await self.work_once()
                    if not processed:
                        await asyncio.sleep(self.poll_interval)
                except StoreUnavailableError as e:
                    logger.warning(
                        f"Store unavailable, retrying in {self.poll_interval}s: {e}",
                        extra={"worker_id": self.worker_id},
                    )
                    await asyncio.sleep(self.poll_interval)
                except CodecError:
                    logger.exception(
                        "Dropped undecodable job",
                        extra={"worker_id": self.worker_id},
                    )
        finally:
            await self.client.remove_worker(self.worker_id)
            clear_context()
            logger.info("Worker stopped", extra={"worker_id": self.worker_id})

    async def stop(self) -> None:
        """Stop after the current job finishes."""
        logger.info("Worker stopping", extra={"worker_id": self.worker_id})
        self._running = False

    async def reserve(self) -> Job | None:
        """Take a job from the first non-empty queue."""
        for queue in self.queues:
            job = await self.client.reserve(queue)
            if job is not None:
                return job
        return None

    async def work_once(self) -> bool:
        """
        Reserve and process at most one job.

        Returns:
            True if a job was processed.
        """
        job = await self.reserve()
        if job is None:
            return False
        await self.process(job)
        return True

    async def process(self, job: Job) -> JobResult:
        """
        Run one job with status and stats bookkeeping.

        The status record is cleared whatever the outcome; its TTL covers
        the case where this process dies first.
        """
        start_time = time.monotonic()
        await self.client.set_worker_status(self.worker_id, job.queue, job.payload)

        try:
            logger.info(
                "Executing job",
                extra={"queue": job.queue, "job_class": job.job_class},
            )

            with start_span(
                SPAN_EXECUTE_JOB,
                queue=job.queue,
                job_class=job.job_class,
                worker_id=self.worker_id,
            ):
                result = await execute_job(job.context(self.worker_id))

            duration = time.monotonic() - start_time

            if result.success:
                logger.info(
                    "Job completed successfully",
                    extra={"queue": job.queue, "duration": f"{duration:.2f}s"},
                )
            else:
                await job.fail(
                    result.exception or "JobFailed",
                    worker_id=self.worker_id,
                    backtrace=result.backtrace,
                    error=result.error,
                )
                await self.client.incr_failed(self.worker_id)
                logger.warning(
                    "Job failed",
                    extra={"queue": job.queue, "error": result.error},
                )

            await self.client.incr_processed(self.worker_id)
            self._metrics.record_job_completed(
                queue=job.queue,
                status="succeeded" if result.success else "failed",
                duration_seconds=duration,
            )
            return result
        finally:
            await self.client.clear_worker_status(self.worker_id)


async def run_async() -> None:
    """Run the worker asynchronously."""
    settings = get_settings()
    setup_logging()
    setup_tracing()
    setup_metrics().serve(settings.prometheus_port)
    logger.info("Serving metrics", extra={"port": settings.prometheus_port})
    client = QueueClient(await init_redis())

    worker = Worker(client)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: asyncio.create_task(worker.stop())
        )

    try:
        await worker.start()
    except RedqueueError:
        logger.exception("Worker exited with error")
        raise
    finally:
        await close_redis()


def run() -> None:
    """Run the worker."""
    asyncio.run(run_async())


if __name__ == "__main__":
    run()

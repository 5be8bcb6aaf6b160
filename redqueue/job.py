"""
Job envelope.

A Job binds a dequeued payload to the queue it came from and to the client
that can report on it. It lives for one execution attempt and is never
stored itself.
"""

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from redqueue.store.codec import validate
from redqueue.types.job import FailureRecord, JobContext, JobPayload

if TYPE_CHECKING:
    from redqueue.client import QueueClient


@dataclass
class Job:
    """
    A reserved job.
    """

    client: "QueueClient" = field(repr=False, compare=False)
    queue: str
    payload: JobPayload

    @classmethod
    async def create(
        cls,
        client: "QueueClient",
        queue: str,
        job_class: str | type,
        *args: Any,
    ) -> int:
        """
        Enqueue a job.

        Returns:
            The queue length after the push.
        """
        return await client.enqueue(queue, job_class, *args)

    @classmethod
    async def reserve(cls, client: "QueueClient", queue: str) -> "Job | None":
        """
        Pop the next job from a queue.

        Returns:
            The job, or None when the queue is empty.

        Raises:
            PayloadShapeError: If the popped value is not a job payload.
        """
        value = await client.pop(queue)
        if value is None:
            return None
        return cls(client=client, queue=queue, payload=validate(value, JobPayload))

    @property
    def job_class(self) -> str:
        return self.payload.job_class

    @property
    def args(self) -> list[Any]:
        return self.payload.args

    def context(self, worker_id: str | None = None) -> JobContext:
        """Build the context handed to a job handler."""
        return JobContext(
            queue=self.queue,
            job_class=self.job_class,
            args=list(self.args),
            worker_id=worker_id,
        )

    async def fail(
        self,
        exception: BaseException | str,
        worker_id: str | None = None,
        backtrace: list[str] | None = None,
        error: str | None = None,
    ) -> FailureRecord:
        """
        Keep a record of this attempt on the failed queue.

        Args:
            exception: The raised exception, or its class name.
            worker_id: The worker that ran the job.
            backtrace: Formatted traceback lines, taken from the exception
                when not given.
            error: Error message, taken from the exception when not given.
        """
        if isinstance(exception, BaseException):
            name = type(exception).__name__
            error = error or str(exception)
            if backtrace is None:
                backtrace = traceback.format_exception(exception)
        else:
            name = exception
            error = error or exception
        failure = FailureRecord(
            failed_at=datetime.now(UTC),
            payload=self.payload,
            exception=name,
            error=error,
            backtrace=backtrace or [],
            worker=worker_id,
            queue=self.queue,
        )
        await self.client.record_failure(failure)
        return failure

"""
Job-related type definitions.

These are the shapes that travel through the store as encoded text:
job payloads on queues, status records under worker keys and failure
records on the failed queue.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JobPayload(BaseModel):
    """
    Job payload structure.

    Serialized as ``{"class": ..., "args": [...]}``. The job class is an
    opaque identifier resolved to a handler by the worker.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    job_class: str = Field(alias="class", min_length=1)
    args: list[Any] = Field(default_factory=list)


class StatusRecord(BaseModel):
    """
    What a worker is doing right now.
    Written before a job runs and cleared afterwards.
    """

    queue: str
    run_at: datetime
    payload: JobPayload


class FailureRecord(BaseModel):
    """
    A failed job attempt, kept on the failed queue for inspection.
    """

    failed_at: datetime
    payload: JobPayload
    exception: str
    error: str
    backtrace: list[str] = Field(default_factory=list)
    worker: str | None = None
    queue: str


class JobResult(BaseModel):
    """
    Result of job execution.
    Returned by job handlers after processing.
    """

    success: bool
    output: Any = None
    error: str | None = None
    exception: str | None = None
    backtrace: list[str] = Field(default_factory=list)
    duration_ms: float | None = None


@dataclass
class JobContext:
    """
    Context passed to job handlers during execution.
    """

    queue: str
    job_class: str
    args: list[Any]
    worker_id: str | None = None


class ClientInfo(BaseModel):
    """Aggregate view of the whole system."""

    pending: int
    processed: int
    queues: int
    workers: int
    working: int
    failed: int
    servers: list[str]

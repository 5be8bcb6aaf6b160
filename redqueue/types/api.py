"""
API request and response type definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from redqueue.constants import WorkerState
from redqueue.types.job import StatusRecord


class EnqueueJobRequest(BaseModel):
    """Request body for pushing a job onto a queue."""

    model_config = ConfigDict(populate_by_name=True)

    job_class: str = Field(..., alias="class", min_length=1, description="Job class identifier")
    args: list[Any] = Field(default_factory=list, description="Arguments passed to the job")


class EnqueueJobResponse(BaseModel):
    """Response body after enqueueing a job."""

    queue: str
    size: int
    message: str = "Job enqueued"


class QueueSummary(BaseModel):
    """Name and depth of a queue."""

    name: str
    size: int


class QueueListResponse(BaseModel):
    """All known queues."""

    queues: list[QueueSummary]
    pending: int


class QueueResponse(BaseModel):
    """A queue with a window of its head."""

    name: str
    size: int
    start: int
    jobs: list[Any]


class WorkerResponse(BaseModel):
    """A registered worker."""

    id: str
    state: WorkerState
    started_at: datetime | None
    status: StatusRecord | None
    processed: int
    failed: int


class WorkerListResponse(BaseModel):
    """All known workers."""

    workers: list[str]
    working: list[str]
    total: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    redis: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None

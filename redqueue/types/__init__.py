"""
Type definitions for the job queue.
"""

from redqueue.types.api import (
    EnqueueJobRequest,
    EnqueueJobResponse,
    ErrorResponse,
    HealthResponse,
    QueueListResponse,
    QueueResponse,
    QueueSummary,
    WorkerListResponse,
    WorkerResponse,
)
from redqueue.types.job import (
    ClientInfo,
    FailureRecord,
    JobContext,
    JobPayload,
    JobResult,
    StatusRecord,
)

__all__ = [
    # API types
    "EnqueueJobRequest",
    "EnqueueJobResponse",
    "ErrorResponse",
    "HealthResponse",
    "QueueListResponse",
    "QueueResponse",
    "QueueSummary",
    "WorkerListResponse",
    "WorkerResponse",
    # Job types
    "ClientInfo",
    "FailureRecord",
    "JobContext",
    "JobPayload",
    "JobResult",
    "StatusRecord",
]

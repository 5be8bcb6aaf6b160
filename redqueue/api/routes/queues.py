"""
Queue routes.
"""

import logging

from fastapi import APIRouter, Query, status

from redqueue.api.dependencies import Client
from redqueue.constants import API_V1_PREFIX, DEFAULT_PEEK_COUNT
from redqueue.types.api import (
    EnqueueJobRequest,
    EnqueueJobResponse,
    QueueListResponse,
    QueueResponse,
    QueueSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_V1_PREFIX}/queues", tags=["Queues"])


@router.get(
    "",
    response_model=QueueListResponse,
    summary="List queues",
    description="List every queue ever pushed to, with its current size.",
)
async def list_queues(client: Client) -> QueueListResponse:
    summaries = [
        QueueSummary(name=name, size=await client.size(name))
        for name in sorted(await client.queues())
    ]
    return QueueListResponse(
        queues=summaries,
        pending=sum(summary.size for summary in summaries),
    )


@router.get(
    "/{queue}",
    response_model=QueueResponse,
    summary="Inspect a queue",
    description="Size of a queue and the jobs in a window from its head. Does not remove anything.",
)
async def get_queue(
    queue: str,
    client: Client,
    start: int = Query(default=0, ge=0),
    count: int = Query(default=DEFAULT_PEEK_COUNT, ge=1, le=100),
) -> QueueResponse:
    """
    Peek at a queue.

    Args:
        queue: Queue name.
        client: Queue client.
        start: Index of the first job to show.
        count: Number of jobs to show.
    """
    jobs = await client.peek(queue, start, count)
    if count == 1:
        jobs = [] if jobs is None else [jobs]

    return QueueResponse(
        name=queue,
        size=await client.size(queue),
        start=start,
        jobs=jobs,
    )


@router.post(
    "/{queue}/jobs",
    response_model=EnqueueJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enqueue a job",
    description="Push a job onto the tail of a queue.",
)
async def enqueue_job(
    queue: str,
    request: EnqueueJobRequest,
    client: Client,
) -> EnqueueJobResponse:
    size = await client.enqueue(queue, request.job_class, *request.args)
    return EnqueueJobResponse(queue=queue, size=size)

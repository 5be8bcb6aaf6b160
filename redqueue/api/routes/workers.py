"""
Worker and stats routes.
"""

from fastapi import APIRouter, HTTPException, status

from redqueue.api.dependencies import Client
from redqueue.constants import API_V1_PREFIX
from redqueue.types.api import WorkerListResponse, WorkerResponse
from redqueue.types.job import ClientInfo

router = APIRouter(prefix=API_V1_PREFIX, tags=["Workers"])


@router.get(
    "/stats",
    response_model=ClientInfo,
    summary="Overall stats",
    description="Pending, processed and failed counts with queue and worker totals.",
)
async def get_stats(client: Client) -> ClientInfo:
    return await client.info()


@router.get(
    "/workers",
    response_model=WorkerListResponse,
    summary="List workers",
    description="Known workers and the subset currently running a job.",
)
async def list_workers(client: Client) -> WorkerListResponse:
    workers = await client.workers()
    working = await client.working()
    return WorkerListResponse(
        workers=sorted(workers),
        working=sorted(working),
        total=len(workers),
    )


@router.get(
    "/workers/{worker_id}",
    response_model=WorkerResponse,
    summary="Get worker details",
    description="State, start time, current job and counters of one worker.",
)
async def get_worker(worker_id: str, client: Client) -> WorkerResponse:
    """
    Get worker details.

    Raises:
        HTTPException: If the worker is not registered.
    """
    if not await client.is_worker(worker_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found",
        )

    return WorkerResponse(
        id=worker_id,
        state=await client.worker_state(worker_id),
        started_at=await client.worker_started(worker_id),
        status=await client.worker_status(worker_id),
        processed=await client.processed(worker_id),
        failed=await client.failed(worker_id),
    )

"""
FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends

from redqueue.client import QueueClient
from redqueue.store.connection import get_client


def get_queue_client() -> QueueClient:
    """Queue client over the shared Redis connection."""
    return QueueClient(get_client())


Client = Annotated[QueueClient, Depends(get_queue_client)]

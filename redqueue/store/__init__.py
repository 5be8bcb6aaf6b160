"""
Store module.
Contains the Redis connection, key layout, codec and the queue, worker and
stats operations built on them.
"""

from redqueue.store.batch import AtomicBatch, EphemeralRecord, atomic_batch
from redqueue.store.connection import (
    close_redis,
    create_client,
    get_client,
    init_redis,
)
from redqueue.store.keys import KeyNamespace
from redqueue.store.queues import QueueStore
from redqueue.store.stats import StatsTracker
from redqueue.store.workers import WorkerRegistry

__all__ = [
    "AtomicBatch",
    "EphemeralRecord",
    "atomic_batch",
    "create_client",
    "get_client",
    "init_redis",
    "close_redis",
    "KeyNamespace",
    "QueueStore",
    "StatsTracker",
    "WorkerRegistry",
]

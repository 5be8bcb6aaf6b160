"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class WorkerState(StrEnum):
    """
    Activity of a registered worker.

    A worker is WORKING while its status record is alive and IDLE otherwise,
    including when the record expired because the worker crashed mid-job.
    """

    WORKING = "working"
    IDLE = "idle"


# Key segments
QUEUE_SEGMENT = "queue"
QUEUES_SEGMENT = "queues"
WORKER_SEGMENT = "worker"
WORKERS_SEGMENT = "workers"
STARTED_SEGMENT = "started"
STATS_SEGMENT = "stats"
STAT_PROCESSED = "processed"
STAT_FAILED = "failed"

# Failed job records are kept in a regular queue so they can be inspected
FAILED_QUEUE = "failed"

# Default values
DEFAULT_KEY_ROOT = "resque"
DEFAULT_KEY_DELIMITER = ":"
DEFAULT_WORKER_TTL_SECONDS = 10_000

# API constants
API_V1_PREFIX = "/v1"
DEFAULT_PEEK_COUNT = 10

# Metrics names
METRIC_QUEUE_DEPTH = "redqueue_queue_depth"
METRIC_JOBS_ENQUEUED = "redqueue_jobs_enqueued_total"
METRIC_JOBS_RESERVED = "redqueue_jobs_reserved_total"
METRIC_JOBS_COMPLETED = "redqueue_jobs_completed_total"
METRIC_JOB_DURATION = "redqueue_job_duration_seconds"
METRIC_WORKER_REGISTRATIONS = "redqueue_worker_registrations_total"

# Trace span names
SPAN_ENQUEUE_JOB = "enqueue_job"
SPAN_RESERVE_JOB = "reserve_job"
SPAN_EXECUTE_JOB = "execute_job"

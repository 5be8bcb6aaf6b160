"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    start_http_server,
)

from redqueue.constants import (
    METRIC_JOB_DURATION,
    METRIC_JOBS_COMPLETED,
    METRIC_JOBS_ENQUEUED,
    METRIC_JOBS_RESERVED,
    METRIC_QUEUE_DEPTH,
    METRIC_WORKER_REGISTRATIONS,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for queue clients and workers.

    Collects metrics for:
    - Queue depth
    - Jobs enqueued, reserved and completed
    - Job execution duration
    - Worker registrations
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of jobs waiting in a queue",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_enqueued = Counter(
            METRIC_JOBS_ENQUEUED,
            "Total number of jobs pushed by this process",
            ["queue", "job_class"],
            registry=self._registry,
        )

        self.jobs_reserved = Counter(
            METRIC_JOBS_RESERVED,
            "Total number of jobs popped by this process",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_completed = Counter(
            METRIC_JOBS_COMPLETED,
            "Total number of job attempts finished by this process",
            ["queue", "status"],
            registry=self._registry,
        )

        self.job_duration = Histogram(
            METRIC_JOB_DURATION,
            "Job execution duration in seconds",
            ["queue", "status"],
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
            registry=self._registry,
        )

        self.worker_registrations = Counter(
            METRIC_WORKER_REGISTRATIONS,
            "Total number of workers registered by this process",
            registry=self._registry,
        )

    def record_job_enqueued(self, queue: str, job_class: str) -> None:
        """Record a job pushed onto a queue."""
        self.jobs_enqueued.labels(queue=queue, job_class=job_class).inc()

    def record_job_reserved(self, queue: str) -> None:
        """Record a job popped from a queue."""
        self.jobs_reserved.labels(queue=queue).inc()

    def record_job_completed(
        self,
        queue: str,
        status: str,
        duration_seconds: float,
    ) -> None:
        """Record a finished job attempt."""
        self.jobs_completed.labels(queue=queue, status=status).inc()
        self.job_duration.labels(queue=queue, status=status).observe(duration_seconds)

    def record_worker_registered(self) -> None:
        self.worker_registrations.inc()

    def update_queue_depth(self, queue: str, depth: int) -> None:
        """Update the observed depth of a queue."""
        self.queue_depth.labels(queue=queue).set(depth)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST

    def serve(self, port: int, addr: str = "0.0.0.0") -> None:
        """
        Expose this collector's registry over HTTP from a background thread.

        For processes without an API server of their own, such as workers.
        """
        start_http_server(port, addr=addr, registry=self._registry)


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics

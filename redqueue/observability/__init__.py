"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from redqueue.observability.logging import bind_context, clear_context, setup_logging
from redqueue.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from redqueue.observability.tracing import get_tracer, setup_tracing, start_span

__all__ = [
    "setup_logging",
    "bind_context",
    "clear_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "start_span",
]

"""
Job handler registry and built-in handlers.

A handler is looked up by the ``class`` field of a job payload. Delivery is
at most once per worker: a job popped by a worker that then crashes is not
retried.
"""

import asyncio
import logging
import time
import traceback
from typing import Awaitable, Callable

from redqueue.types.job import JobContext, JobResult

logger = logging.getLogger(__name__)

# Type alias for job handler functions
JobHandler = Callable[[JobContext], Awaitable[JobResult]]

# Handler registry
_handlers: dict[str, JobHandler] = {}


def register_handler(job_class: str) -> Callable[[JobHandler], JobHandler]:
    """
    Decorator to register a job handler.

    Args:
        job_class: The job class identifier this handler processes.

    Returns:
        Decorator function.

    Example:
        @register_handler("SendEmail")
        async def send_email(context: JobContext) -> JobResult:
            ...
    """
    def decorator(handler: JobHandler) -> JobHandler:
        _handlers[job_class] = handler
        logger.debug(f"Registered handler for job class: {job_class}")
        return handler
    return decorator


def unregister_handler(job_class: str) -> None:
    _handlers.pop(job_class, None)


def get_handler(job_class: str) -> JobHandler | None:
    """
    Get the handler for a job class.

    Returns:
        The handler function or None if not found.
    """
    return _handlers.get(job_class)


def list_handlers() -> list[str]:
    """List all registered job classes."""
    return list(_handlers.keys())


# ============================================================================
# Built-in job handlers
# ============================================================================


@register_handler("echo")
async def handle_echo(context: JobContext) -> JobResult:
    """
    Echo handler for testing.

    Returns the job arguments as output.
    """
    logger.info("Echo job executing", extra={"queue": context.queue})
    return JobResult(success=True, output={"echo": context.args})


@register_handler("sleep")
async def handle_sleep(context: JobContext) -> JobResult:
    """
    Sleep handler for testing delays.

    The first argument is the number of seconds to sleep (default 1).
    """
    duration = float(context.args[0]) if context.args else 1.0
    await asyncio.sleep(duration)
    return JobResult(success=True, output={"slept_for": duration})


@register_handler("failing_job")
async def handle_failing_job(context: JobContext) -> JobResult:
    """
    Handler that always fails - for testing failure tracking.
    """
    raise RuntimeError(f"Intentional failure on queue {context.queue}")


async def execute_job(context: JobContext) -> JobResult:
    """
    Execute a job using the handler registered for its class.

    A missing handler or an exception raised by the handler becomes a
    failed result carrying the exception name, message and backtrace.

    Args:
        context: The job context.

    Returns:
        JobResult from the handler.
    """
    handler = get_handler(context.job_class)

    if handler is None:
        logger.error(
            f"No handler for job class: {context.job_class}",
            extra={"queue": context.queue},
        )
        return JobResult(
            success=False,
            exception="HandlerNotFound",
            error=f"No handler registered for job class: {context.job_class}",
        )

    start = time.monotonic()
    try:
        result = await handler(context)
    except Exception as e:
        logger.exception(
            "Handler raised exception",
            extra={"queue": context.queue, "job_class": context.job_class},
        )
        return JobResult(
            success=False,
            exception=type(e).__name__,
            error=str(e),
            backtrace=traceback.format_exception(e),
            duration_ms=(time.monotonic() - start) * 1000,
        )

    if result.duration_ms is None:
        result.duration_ms = (time.monotonic() - start) * 1000
    return result

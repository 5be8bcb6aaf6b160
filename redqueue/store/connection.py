"""
Redis connection management.
Handles the shared async client and translation of transport failures.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from redqueue.config import get_settings
from redqueue.exceptions import MalformedPayloadError, StoreUnavailableError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# Transport failures surfaced to callers as StoreUnavailableError
STORE_ERRORS = (RedisConnectionError, RedisTimeoutError)

# Global client instance
_client: redis.Redis | None = None


def create_client(redis_url: str | None = None) -> redis.Redis:
    """
    Create a new async Redis client.

    Args:
        redis_url: Connection URL. Defaults to the configured one.

    Returns:
        redis.Redis: A client that returns str rather than bytes.
    """
    settings = get_settings()
    return redis.from_url(
        redis_url or settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
    )


def get_client() -> redis.Redis:
    """
    Get or create the shared Redis client.

    A single client is safe to share between tasks of one event loop; it
    pools its own connections.
    """
    global _client
    if _client is None:
        _client = create_client()
    return _client


async def init_redis() -> redis.Redis:
    """
    Initialize the shared client and check that the server answers.
    Should be called on application startup.
    """
    client = get_client()
    try:
        await client.ping()
    except STORE_ERRORS as e:
        raise StoreUnavailableError("ping", str(e)) from e
    logger.info("Redis connection initialized")
    return client


async def close_redis() -> None:
    """
    Close the shared client.
    Should be called on application shutdown.
    """
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Redis connection closed")


def describe_server(client: redis.Redis) -> str:
    """Return host:port/db for the server a client points at."""
    kwargs = client.connection_pool.connection_kwargs
    if "path" in kwargs:
        return f"unix://{kwargs['path']}"
    host = kwargs.get("host", "localhost")
    port = kwargs.get("port", 6379)
    db = kwargs.get("db", 0)
    return f"redis://{host}:{port}/{db}"


def store_operation(
    primitive: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator translating store failures into package errors.

    Transport failures become StoreUnavailableError. A stored value that
    is not UTF-8 fails while the client decodes the reply, before the codec
    sees it; that becomes MalformedPayloadError.

    No retry happens here; the caller owns the retry policy.

    Args:
        primitive: Name of the operation, reported in the error.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except STORE_ERRORS as e:
                logger.error(
                    "Store operation failed",
                    extra={"primitive": primitive, "error": str(e)},
                )
                raise StoreUnavailableError(primitive, str(e)) from e
            except UnicodeDecodeError as e:
                logger.error(
                    "Undecodable value in store",
                    extra={"primitive": primitive, "error": str(e)},
                )
                raise MalformedPayloadError(e.object, str(e)) from e

        return wrapper

    return decorator

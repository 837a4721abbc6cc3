# common/cache.py
"""
Optional Redis-backed JSON cache.

Every helper degrades to a no-op when ``REDIS_URL`` is unset or Redis cannot
be reached, so callers never need to know whether caching is active.
"""
import json
import logging
import os
from typing import Any, Callable, Optional

import redis

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """
    Return a Redis client if REDIS_URL is configured, otherwise None.

    A failed connection attempt is logged and disables caching for this
    call; the next call tries again.
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    redis_url = os.getenv("REDIS_URL")
    if not redis_url:
        return None

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        client.ping()
    except redis.RedisError as exc:
        logger.warning("Redis at %s unavailable, caching disabled: %s", redis_url, exc)
        return None

    _redis_client = client
    return _redis_client


def get_cached_json(key: str) -> Optional[Any]:
    client = get_redis_client()
    if client is None:
        return None

    raw = client.get(key)
    if raw is None:
        return None
    return json.loads(raw)


def set_cached_json(key: str, value: Any, ttl_seconds: int = 60) -> None:
    client = get_redis_client()
    if client is None:
        return

    client.setex(key, ttl_seconds, json.dumps(value, default=str))


def get_or_set_json(key: str, loader: Callable[[], Any], ttl_seconds: int = 60) -> Any:
    """
    Return the cached value for ``key``, or call ``loader`` and cache its result.

    ``loader`` must return JSON-serializable data. Exceptions from the
    loader propagate and nothing is cached.
    """
    cached = get_cached_json(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key)
        return cached

    value = loader()
    set_cached_json(key, value, ttl_seconds=ttl_seconds)
    return value


def delete_prefix(prefix: str) -> None:
    """
    Delete all keys starting with prefix.

    Example: ``prefix='rooms:'`` drops the room list and every room detail.
    """
    client = get_redis_client()
    if client is None:
        return

    for key in client.scan_iter(prefix + "*"):
        client.delete(key)

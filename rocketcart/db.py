"""
Key-value client for the durable cart slot.

Uses Upstash Redis over its REST API:
- UPSTASH_REDIS_REST_URL
- UPSTASH_REDIS_REST_TOKEN
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from rocketcart import config

_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Raises:
        ValueError: if the REST URL or token is not configured
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


def reset_redis() -> None:
    """Drop the cached client (tests, credential rotation)."""
    global _redis_client
    _redis_client = None

"""
Shared Redis connection for the dashboard cache and change notifications
Supports both a REDIS_URL (managed Redis) and host/port settings
"""

import logging
from typing import Optional

import redis

from . import config

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


def _mask_url(redis_url: str) -> str:
    if "@" in redis_url:
        url_parts = redis_url.split("@")
        protocol = url_parts[0].split(":")[0]
        return f"{protocol}:****@{url_parts[1]}"
    return "****"


def get_redis_client() -> redis.Redis:
    """
    Get or create the Redis client.
    Raises when Redis is unreachable; callers decide how to fail open.
    """
    global redis_client

    if redis_client is None:
        if config.REDIS_URL:
            logger.info(f"Using Redis URL connection: {_mask_url(config.REDIS_URL)}")
            client = redis.from_url(
                config.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=10,
            )
        else:
            logger.info(f"Using Redis at {config.REDIS_HOST}:{config.REDIS_PORT}")
            client = redis.Redis(
                host=config.REDIS_HOST,
                port=config.REDIS_PORT,
                password=config.REDIS_PASSWORD,
                db=config.REDIS_DB,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=10,
                retry_on_timeout=True,
                health_check_interval=30,
            )

        try:
            client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise
        redis_client = client
        logger.info("Redis connected successfully")

    return redis_client


def get_async_redis_client():
    """New asyncio client for long-lived subscriptions (one per subscriber)"""
    import redis.asyncio as aioredis

    if config.REDIS_URL:
        return aioredis.from_url(config.REDIS_URL, decode_responses=True)
    return aioredis.Redis(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        password=config.REDIS_PASSWORD,
        db=config.REDIS_DB,
        decode_responses=True,
    )

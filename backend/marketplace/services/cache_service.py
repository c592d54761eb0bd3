"""
Redis caching service for the public category list.

CACHING STRATEGY
================

What we cache:
  - The active-category list served by GET /categories (JSON-serialized)
  - Cache key: "categories:active"

Why:
  - Every page of the SPA loads the taxonomy for its filters and menus
  - Categories change only through admin actions

Invalidation strategy:
  - Any admin create/update/delete of a category deletes the key
  - TTL-based expiry as safety net

Redis is advisory: when it is disabled or unreachable, reads go straight to
the database and writes are skipped.
"""

import json
from typing import Optional

import redis.asyncio as redis
from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger
from marketplace.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

CATEGORY_LIST_KEY = "categories:active"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            redis_connection_errors.inc()
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_categories() -> Optional[list[dict]]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(CATEGORY_LIST_KEY)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=CATEGORY_LIST_KEY)
            return json.loads(data)
        logger.debug("cache_miss", key=CATEGORY_LIST_KEY)
    except Exception as e:
        logger.error("cache_get_error", key=CATEGORY_LIST_KEY, error=str(e))

    return None


async def set_cached_categories(data: list[dict]) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(CATEGORY_LIST_KEY, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=CATEGORY_LIST_KEY, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=CATEGORY_LIST_KEY, error=str(e))


async def invalidate_category_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = await client.delete(CATEGORY_LIST_KEY)
        logger.info("cache_invalidated", key=CATEGORY_LIST_KEY, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}

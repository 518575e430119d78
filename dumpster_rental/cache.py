"""
Redis JSON cache for upstream lookups (distance matrix results)
Every operation fails open: a cache error is a miss
"""

import json
import logging
from typing import Any, Optional

from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self, prefix: str):
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        client = get_redis_client()
        if client is None:
            return None
        try:
            value = client.get(self._key(key))
        except Exception as e:
            logger.warning(f"⚠️ Cache get error for {key}: {e}")
            return None
        if value:
            logger.debug(f"✅ Cache HIT: {key}")
            return json.loads(value)
        return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = get_redis_client()
        if client is None:
            return False
        try:
            client.setex(self._key(key), ttl, json.dumps(value))
            return True
        except Exception as e:
            logger.warning(f"⚠️ Cache set error for {key}: {e}")
            return False

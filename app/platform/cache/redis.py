import json
from typing import Any, Dict, List

from redis.asyncio import Redis

from app.platform.cache.base import CacheStore
from app.platform.logger import get_logger

logger = get_logger("cache.redis")


class RedisCacheStore(CacheStore):
    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        return cls(Redis.from_url(url, encoding="utf-8", decode_responses=True))

    async def load(self, key: str) -> List[Dict[str, Any]]:
        raw = await self.redis.get(key)
        if not raw:
            return []

        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache payload under {key}: {e}")
            return []

        if not isinstance(entries, list):
            logger.warning(f"Discarding cache payload under {key}: expected a list")
            return []
        return entries

    async def save(self, key: str, entries: List[Dict[str, Any]]) -> None:
        await self.redis.set(key, json.dumps(entries))

    async def clear(self, key: str) -> None:
        await self.redis.delete(key)

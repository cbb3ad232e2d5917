from app.platform.cache.base import CacheStore
from app.platform.cache.memory import MemoryCacheStore
from app.platform.cache.redis import RedisCacheStore
from app.platform.config import Settings
from app.platform.logger import get_logger

logger = get_logger("cache.store")


def build_cache_store(settings: Settings) -> CacheStore:
    """Redis when REDIS_URL is configured, in-memory otherwise (and in tests)."""
    if settings.REDIS_URL and not settings.FORCE_IN_MEMORY_CACHE:
        logger.info("Using Redis cache store")
        return RedisCacheStore.from_url(settings.REDIS_URL)

    logger.info("Using in-memory cache store")
    return MemoryCacheStore()

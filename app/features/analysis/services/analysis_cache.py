import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from app.features.analysis.schemas.analysis import CacheEntry, WebsiteAnalysis
from app.platform.cache.base import CacheStore
from app.platform.logger import get_logger
from app.platform.utils.url_validator import normalize_url

logger = get_logger("analysis_cache")

Clock = Callable[[], datetime]

MS_PER_HOUR = 60 * 60 * 1000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class AnalysisCache:
    """
    Per-URL analysis cache with a freshness window and a size cap.

    The whole entry list lives under a single store key and is rewritten on
    every change. Expired entries are purged whenever the list is read.
    """

    def __init__(
        self,
        store: CacheStore,
        key: str = "metalyz_url_analysis_cache",
        expiry_hours: int = 24,
        max_entries: int = 50,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.key = key
        self.expiry_hours = expiry_hours
        self.max_entries = max_entries
        self.clock = clock
        self._lock = asyncio.Lock()

    async def get(self, url: str, now: Optional[datetime] = None) -> Optional[WebsiteAnalysis]:
        normalized = normalize_url(url)
        async with self._lock:
            entries = await self._load_valid(now or self.clock())

        for entry in entries:
            if entry.url == normalized:
                return entry.analysis
        return None

    async def set(self, url: str, analysis: WebsiteAnalysis, now: Optional[datetime] = None) -> None:
        now = now or self.clock()
        normalized = normalize_url(url)

        async with self._lock:
            entries = [e for e in await self._load_valid(now) if e.url != normalized]
            entries.append(CacheEntry(url=normalized, analysis=analysis, timestamp=to_epoch_ms(now)))

            # Oldest writes are at the front
            entries = entries[-self.max_entries:]
            await self._save(entries)

        logger.info(f"Cached analysis for {normalized} ({len(entries)} entries)")

    async def clear(self) -> None:
        async with self._lock:
            await self.store.clear(self.key)

    async def entries(self, now: Optional[datetime] = None) -> List[CacheEntry]:
        async with self._lock:
            return await self._load_valid(now or self.clock())

    def is_fresh(self, entry: CacheEntry, now: datetime) -> bool:
        age_hours = (to_epoch_ms(now) - entry.timestamp) / MS_PER_HOUR
        return age_hours < self.expiry_hours

    async def _load_valid(self, now: datetime) -> List[CacheEntry]:
        raw_entries = await self.store.load(self.key)

        entries: List[CacheEntry] = []
        for raw in raw_entries:
            try:
                entries.append(CacheEntry.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Dropping malformed cache entry: {e.error_count()} errors")

        valid = [entry for entry in entries if self.is_fresh(entry, now)]
        if len(valid) != len(raw_entries):
            logger.info(f"Purged {len(raw_entries) - len(valid)} expired cache entries")
            await self._save(valid)
        return valid

    async def _save(self, entries: List[CacheEntry]) -> None:
        await self.store.save(self.key, [entry.model_dump(by_alias=True) for entry in entries])

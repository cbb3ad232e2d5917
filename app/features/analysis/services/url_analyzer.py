import asyncio
from functools import lru_cache
from typing import Dict

from app.features.analysis.schemas.analysis import FeatureSet, WebsiteAnalysis
from app.features.analysis.services.analysis_cache import AnalysisCache
from app.features.analysis.services.html_extractor import HtmlExtractorService
from app.features.analysis.services.page_fetcher import FetchError, PageFetcher
from app.features.analysis.services.seo_scorer import calculate_seo_score
from app.platform.cache.store import build_cache_store
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.utils.url_validator import normalize_url

logger = get_logger("url_analyzer")

FALLBACK_RECOMMENDATIONS = [
    "Ensure website is accessible and not blocking requests",
    "Check if URL is correct and website is online",
    "Try again later if website is temporarily unavailable",
]


def build_analysis(features: FeatureSet) -> WebsiteAnalysis:
    breakdown = calculate_seo_score(features)
    return WebsiteAnalysis(
        **features.model_dump(),
        seo_score=breakdown.total_score,
        issues=breakdown.issues,
        recommendations=breakdown.recommendations,
        breakdown=breakdown.category_scores(),
    )


def create_fallback_analysis(url: str, error: str) -> WebsiteAnalysis:
    """Empty analysis with a zero score for pages that could not be fetched."""
    return WebsiteAnalysis(
        url=url,
        seo_score=0,
        issues=[f"Website is unreachable or blocked: {error}"],
        recommendations=list(FALLBACK_RECOMMENDATIONS),
    )


class UrlAnalyzer:
    """
    Cache-first analysis of a URL.

    Concurrent misses for the same URL wait on one in-flight fetch instead
    of racing each other to write the cache.
    """

    def __init__(self, cache: AnalysisCache, fetcher: PageFetcher):
        self.cache = cache
        self.fetcher = fetcher
        self._in_flight: Dict[str, asyncio.Lock] = {}

    async def analyze(self, url: str) -> WebsiteAnalysis:
        normalized = normalize_url(url)

        cached = await self.cache.get(normalized)
        if cached is not None:
            logger.info(f"Cache hit for {normalized}")
            return cached

        lock = self._in_flight.setdefault(normalized, asyncio.Lock())
        try:
            async with lock:
                # Another caller may have filled the cache while we waited
                cached = await self.cache.get(normalized)
                if cached is not None:
                    logger.info(f"Cache hit for {normalized} after waiting on in-flight analysis")
                    return cached

                logger.info(f"Cache miss for {normalized}, analyzing")
                try:
                    analysis = await self.run_analysis(normalized)
                except FetchError as e:
                    logger.warning(f"Analysis of {normalized} failed, caching fallback: {e}")
                    analysis = create_fallback_analysis(normalized, str(e))

                await self.cache.set(normalized, analysis)
                return analysis
        finally:
            if not lock.locked():
                self._in_flight.pop(normalized, None)

    async def run_analysis(self, url: str) -> WebsiteAnalysis:
        """Uncached fetch, extract and score. Raises FetchError."""
        page = await self.fetcher.fetch(url)
        features = HtmlExtractorService.extract(
            page.html, url, load_time=page.load_time, size=page.size
        )
        return build_analysis(features)


@lru_cache
def get_url_analyzer() -> UrlAnalyzer:
    cache = AnalysisCache(
        build_cache_store(settings),
        key=settings.ANALYSIS_CACHE_KEY,
        expiry_hours=settings.CACHE_EXPIRY_HOURS,
        max_entries=settings.CACHE_MAX_ENTRIES,
    )
    fetcher = PageFetcher(
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        user_agent=settings.CRAWLER_USER_AGENT,
    )
    return UrlAnalyzer(cache, fetcher)

import asyncio

import httpx
import pytest

from app.features.analysis.schemas.analysis import WebsiteAnalysis
from app.features.analysis.services.page_fetcher import FetchError
from app.features.analysis.services.url_analyzer import build_analysis, create_fallback_analysis
from app.features.analysis.services.html_extractor import HtmlExtractorService


class TestUrlAnalyzer:
    @pytest.mark.asyncio
    async def test_analyze_extracts_and_scores(self, analyzer, site):
        analysis = await analyzer.analyze("https://example.com")

        assert isinstance(analysis, WebsiteAnalysis)
        assert analysis.title == "Best SEO Optimization Services | Acme Corp"
        assert analysis.headings.h1 == ["Grow your organic traffic today"]
        assert analysis.images.total == 3
        assert analysis.images.without_alt == 1
        assert analysis.links.internal == 2
        assert analysis.links.external == 1
        assert analysis.breakdown.title_score == 28
        assert analysis.seo_score == analysis.breakdown.total_score
        assert "1 images missing alt text" in analysis.issues
        assert site.requests[0].headers["user-agent"] == "Metalyz-Test-Bot/1.0"

    @pytest.mark.asyncio
    async def test_repeat_analysis_is_served_from_cache(self, analyzer, site):
        first = await analyzer.analyze("https://example.com")
        second = await analyzer.analyze("https://example.com")

        assert first == second
        assert site.calls == 1

    @pytest.mark.asyncio
    async def test_scheme_less_url_shares_cache_entry(self, analyzer, site):
        first = await analyzer.analyze("example.com")
        second = await analyzer.analyze("https://example.com")

        assert first.url == "https://example.com"
        assert first == second
        assert site.calls == 1
        assert site.requests[0].url.scheme == "https"
        assert site.requests[0].url.host == "example.com"

    @pytest.mark.asyncio
    async def test_different_urls_are_fetched_separately(self, analyzer, site):
        await analyzer.analyze("https://example.com")
        await analyzer.analyze("https://example.com/about")

        assert site.calls == 2

    @pytest.mark.asyncio
    async def test_expired_entry_triggers_fresh_fetch(self, analyzer, site, clock):
        await analyzer.analyze("https://example.com")

        clock.advance(hours=23)
        await analyzer.analyze("https://example.com")
        assert site.calls == 1

        clock.advance(hours=2)
        site.html = "<title>Updated page title for a new analysis</title>"
        refreshed = await analyzer.analyze("https://example.com")

        assert site.calls == 2
        assert refreshed.title == "Updated page title for a new analysis"

    @pytest.mark.asyncio
    async def test_unreachable_host_returns_cached_fallback(self, analyzer, site):
        site.error = httpx.ConnectError("Name or service not known")

        first = await analyzer.analyze("https://unreachable.invalid")
        second = await analyzer.analyze("https://unreachable.invalid")

        assert first.seo_score == 0
        assert len(first.issues) == 1
        assert "unreachable" in first.issues[0]
        assert "Name or service not known" in first.issues[0]
        assert first.breakdown is None
        assert second == first
        assert site.calls == 1

    @pytest.mark.asyncio
    async def test_http_error_status_returns_fallback(self, analyzer, site):
        site.status_code = 500

        analysis = await analyzer.analyze("https://example.com")

        assert analysis.seo_score == 0
        assert analysis.issues == ["Website is unreachable or blocked: HTTP 500: Internal Server Error"]

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_fetch(self, analyzer, site):
        results = await asyncio.gather(
            analyzer.analyze("https://example.com"),
            analyzer.analyze("https://example.com"),
            analyzer.analyze("example.com"),
        )

        assert site.calls == 1
        assert results[0] == results[1] == results[2]

    @pytest.mark.asyncio
    async def test_run_analysis_bypasses_cache(self, analyzer, site):
        await analyzer.run_analysis("https://example.com")
        await analyzer.run_analysis("https://example.com")

        assert site.calls == 2
        assert await analyzer.cache.get("https://example.com") is None

    @pytest.mark.asyncio
    async def test_run_analysis_raises_fetch_error(self, analyzer, site):
        site.status_code = 404

        with pytest.raises(FetchError, match="HTTP 404"):
            await analyzer.run_analysis("https://example.com")


class TestBuildAnalysis:
    def test_build_analysis_merges_features_and_score(self):
        features = HtmlExtractorService.extract(
            "<title>Best SEO Optimization Services | Acme Corp</title>",
            "https://example.com",
            load_time=900,
            size=100,
        )

        analysis = build_analysis(features)

        assert analysis.features() == features
        assert analysis.breakdown.title_score == 28
        assert analysis.breakdown.performance_score == 4
        assert analysis.breakdown.image_score == 8
        assert analysis.seo_score == 28 + 4 + 8

    def test_fallback_is_empty(self):
        fallback = create_fallback_analysis("https://example.com", "boom")

        assert fallback.title is None
        assert fallback.meta_description is None
        assert fallback.headings.h1 == []
        assert fallback.images.total == 0
        assert fallback.links.internal == 0
        assert fallback.performance.load_time == 0
        assert fallback.seo_score == 0
        assert fallback.issues == ["Website is unreachable or blocked: boom"]
        assert len(fallback.recommendations) == 3

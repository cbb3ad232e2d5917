"""
Test configuration and fixtures for the Metalyz SEO API.

The target website is simulated with httpx.MockTransport and the analysis
cache always uses the in-memory store, so no test touches the network or Redis.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

from dotenv import load_dotenv

load_dotenv()

os.environ["FORCE_IN_MEMORY_CACHE"] = "true"

import httpx
import pytest
from fastapi.testclient import TestClient

from app.features.analysis.services.analysis_cache import AnalysisCache
from app.features.analysis.services.page_fetcher import PageFetcher
from app.features.analysis.services.url_analyzer import UrlAnalyzer, get_url_analyzer
from app.platform.cache.memory import MemoryCacheStore


SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <TITLE>  Best SEO Optimization Services | Acme Corp  </TITLE>
  <meta charset="utf-8">
  <meta name="description" content="  Discover how Acme helps small teams grow organic traffic. Learn our process, get a free audit and start ranking for the searches that matter.  ">
  <meta name='keywords' content='seo, marketing, web audit'>
</head>
<body>
  <h1 class="hero">Grow your <em>organic</em> traffic today</h1>
  <h2>Audits</h2>
  <h2>Content</h2>
  <h3>Technical fixes</h3>
  <img src="/logo.png" alt="Acme logo">
  <img src="/team.jpg" alt="">
  <img src="/banner.jpg">
  <a href="/about">About</a>
  <a href="https://example.com/contact">Contact</a>
  <a href="https://twitter.com/acme">Twitter</a>
</body>
</html>
"""


class FakeSite:
    """Stands in for the analyzed website and counts the requests it receives."""

    def __init__(self, html: str = SAMPLE_HTML, status_code: int = 200, error: Optional[Exception] = None):
        self.html = html
        self.status_code = status_code
        self.error = error
        self.calls = 0
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.html)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def build_analyzer(site: FakeSite, clock: Optional[FakeClock] = None, max_entries: int = 50) -> UrlAnalyzer:
    cache = AnalysisCache(
        MemoryCacheStore(),
        expiry_hours=24,
        max_entries=max_entries,
        clock=clock or FakeClock(),
    )
    fetcher = PageFetcher(timeout=10.0, user_agent="Metalyz-Test-Bot/1.0", transport=site.transport)
    return UrlAnalyzer(cache, fetcher)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def analyzer(site, clock) -> UrlAnalyzer:
    return build_analyzer(site, clock)


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app, analyzer) -> Generator[TestClient, None, None]:
    """
    Test client whose analyzer talks to the FakeSite fixture.
    The dependency override is removed again after each test.
    """
    test_app.dependency_overrides[get_url_analyzer] = lambda: analyzer
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.pop(get_url_analyzer, None)

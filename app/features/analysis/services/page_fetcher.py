import asyncio
import time
from typing import Optional

import httpx
from pydantic import BaseModel

from app.platform.logger import get_logger

logger = get_logger("page_fetcher")


class FetchError(Exception):
    """The target page could not be retrieved (timeout, non-2xx, network)."""


class FetchedPage(BaseModel):
    html: str
    load_time: int
    size: int

    class Config:
        frozen = True


class PageFetcher:
    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "Metalyz-SEO-Bot/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def fetch(self, url: str) -> FetchedPage:
        """
        GET the page and measure how long the body took to arrive.
        The whole request, body included, is aborted once `timeout` seconds
        have passed. Any failure is raised as FetchError with a readable message.
        """
        logger.info(f"Fetching {url}")
        started = time.perf_counter()

        try:
            response = await asyncio.wait_for(self._get(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Timed out fetching {url}")
            raise FetchError(f"Request timed out after {self.timeout:g} seconds") from e
        except (httpx.InvalidURL, ValueError) as e:
            raise FetchError(f"Invalid URL: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Could not reach {url}: {e}")
            raise FetchError(str(e) or f"Could not reach {url}") from e

        if not response.is_success:
            logger.warning(f"{url} returned HTTP {response.status_code}")
            raise FetchError(f"HTTP {response.status_code}: {response.reason_phrase}")

        html = response.text
        load_time = int((time.perf_counter() - started) * 1000)

        return FetchedPage(
            html=html,
            load_time=load_time,
            size=len(html.encode("utf-8")),
        )

    async def _get(self, url: str) -> httpx.Response:
        # Per-phase httpx timeouts stay as a second guard under the overall deadline
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            return await client.get(url)

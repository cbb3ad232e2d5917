import re
from typing import List, Optional
from urllib.parse import urlparse

from app.features.analysis.schemas.analysis import (
    FeatureSet,
    HeadingSet,
    ImageStats,
    LinkStats,
    PerformanceStats,
)


class HtmlExtractorService:
    """
    Pattern-based feature extraction. No DOM is built, so malformed markup
    only ever yields missing values, never an exception.
    """

    TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE)
    META_PATTERN = r"""<meta[^>]*name=["']{name}["'][^>]*content=["']([^"']*)["'][^>]*>"""
    HEADING_PATTERN = r"<{tag}(?:\s[^>]*)?>(.*?)</{tag}\s*>"
    TAG_PATTERN = re.compile(r"<[^>]*>")
    IMG_PATTERN = re.compile(r"<img[^>]*>", re.IGNORECASE)
    ALT_PATTERN = re.compile(r"""alt=["'][^"']*["']""", re.IGNORECASE)
    LINK_PATTERN = re.compile(r"""<a[^>]*href=["']([^"']*)["'][^>]*>""", re.IGNORECASE)

    @staticmethod
    def extract(html: str, url: str, load_time: int = 0, size: int = 0) -> FeatureSet:
        html = html or ""
        return FeatureSet(
            url=url,
            title=HtmlExtractorService.extract_title(html),
            meta_description=HtmlExtractorService.extract_meta(html, "description"),
            meta_keywords=HtmlExtractorService.extract_meta(html, "keywords"),
            headings=HtmlExtractorService.extract_headings(html),
            images=HtmlExtractorService.extract_images(html),
            links=HtmlExtractorService.extract_links(html, url),
            performance=PerformanceStats(load_time=max(load_time, 0), size=max(size, 0)),
        )

    @staticmethod
    def extract_title(html: str) -> Optional[str]:
        match = HtmlExtractorService.TITLE_PATTERN.search(html)
        return match.group(1).strip() if match else None

    @staticmethod
    def extract_meta(html: str, name: str) -> Optional[str]:
        """Content of the first <meta name=...> tag; name must precede content."""
        pattern = HtmlExtractorService.META_PATTERN.format(name=re.escape(name))
        match = re.search(pattern, html, re.IGNORECASE)
        return match.group(1).strip() if match else None

    @staticmethod
    def extract_headings(html: str) -> HeadingSet:
        # Empty headings stay in the list; they count toward the H2/H3 tiers
        headings = {}
        for tag in ["h1", "h2", "h3"]:
            pattern = HtmlExtractorService.HEADING_PATTERN.format(tag=tag)
            headings[tag] = [
                HtmlExtractorService.strip_tags(inner)
                for inner in re.findall(pattern, html, re.IGNORECASE | re.DOTALL)
            ]
        return HeadingSet(**headings)

    @staticmethod
    def strip_tags(fragment: str) -> str:
        return HtmlExtractorService.TAG_PATTERN.sub("", fragment).strip()

    @staticmethod
    def extract_images(html: str) -> ImageStats:
        tags: List[str] = HtmlExtractorService.IMG_PATTERN.findall(html)
        with_alt = sum(1 for tag in tags if HtmlExtractorService.ALT_PATTERN.search(tag))
        return ImageStats(total=len(tags), with_alt=with_alt, without_alt=len(tags) - with_alt)

    @staticmethod
    def extract_links(html: str, url: str) -> LinkStats:
        """
        Root-relative hrefs and hrefs textually containing the page hostname
        are internal. Everything else, including fragments and mailto:, is external.
        """
        hrefs = HtmlExtractorService.LINK_PATTERN.findall(html)
        hostname = HtmlExtractorService._hostname(url)

        internal = 0
        for href in hrefs:
            if href.startswith("/") or (hostname and hostname in href):
                internal += 1

        return LinkStats(internal=internal, external=len(hrefs) - internal)

    @staticmethod
    def _hostname(url: str) -> str:
        try:
            return urlparse(url).hostname or ""
        except ValueError:
            return ""

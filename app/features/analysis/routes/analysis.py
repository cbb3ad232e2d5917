from fastapi import APIRouter, Depends, status

from app.features.analysis.schemas.analysis import AnalyzeUrlRequest
from app.features.analysis.schemas.meta_tags import GeneratedMetaTags, MetaTagPreview
from app.features.analysis.services.meta_tags import format_meta_tags_html, validate_meta_tags
from app.features.analysis.services.page_fetcher import FetchError
from app.features.analysis.services.url_analyzer import UrlAnalyzer, get_url_analyzer
from app.platform.logger import get_logger
from app.platform.response import api_response
from app.platform.utils.url_validator import validate_url

logger = get_logger("analysis_routes")

router = APIRouter(tags=["analysis"])


def _invalid_url_response(error: str):
    return api_response(message=error, status_code=status.HTTP_400_BAD_REQUEST)


@router.post("/analyze-url")
async def analyze_url(
    request: AnalyzeUrlRequest,
    analyzer: UrlAnalyzer = Depends(get_url_analyzer),
):
    """Fetch, extract and score a page without touching the cache."""
    is_valid, url, error = validate_url(request.url or "")
    if not is_valid:
        return _invalid_url_response(error)

    try:
        analysis = await analyzer.run_analysis(url)
    except FetchError as e:
        logger.error(f"URL analysis error for {url}: {e}")
        return api_response(
            message="Failed to analyze URL",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            data={"error": str(e)},
        )

    return api_response(data=analysis, message="URL analyzed")


@router.post("/analyze")
async def analyze(
    request: AnalyzeUrlRequest,
    analyzer: UrlAnalyzer = Depends(get_url_analyzer),
):
    """Cached analysis. Unreachable sites still return a zero-score result."""
    is_valid, url, error = validate_url(request.url or "")
    if not is_valid:
        return _invalid_url_response(error)

    analysis = await analyzer.analyze(url)
    return api_response(data=analysis, message="URL analyzed")


@router.delete("/analyze/cache")
async def clear_analysis_cache(analyzer: UrlAnalyzer = Depends(get_url_analyzer)):
    await analyzer.cache.clear()
    return api_response(message="Analysis cache cleared")


@router.post("/meta-tags/preview")
async def preview_meta_tags(tags: GeneratedMetaTags, owner: bool = False):
    preview = MetaTagPreview(
        validation=validate_meta_tags(tags, is_owner=owner),
        html=format_meta_tags_html(tags),
    )
    return api_response(data=preview, message="Meta tags checked")

from typing import Any, Dict, List, Tuple, Union

from app.features.analysis.schemas.analysis import (
    FeatureSet,
    HeadingSet,
    ImageStats,
    ScoreBreakdown,
    WebsiteAnalysis,
)

FeatureInput = Union[FeatureSet, Dict[str, Any]]

# Title bonus vocabularies, matched as lowercase substrings
SEO_TITLE_KEYWORDS = ("seo", "optimization", "marketing")
BUSINESS_TITLE_KEYWORDS = ("business", "company", "service")
TECH_TITLE_KEYWORDS = ("web", "digital", "online")

CTA_WORDS = ("click", "visit", "learn", "discover", "get", "try", "buy", "download", "start", "join")

SLOW_PAGE_THRESHOLD_MS = 3000


class SeoScorerService:
    """
    Deterministic rule-based SEO scoring.

    Every method is a pure function of its input: no I/O, no clock, no
    randomness. The same FeatureSet always produces the same ScoreBreakdown.
    """

    @staticmethod
    def calculate(features: FeatureInput) -> ScoreBreakdown:
        if not isinstance(features, FeatureSet):
            features = features_from_dict(features)

        title_score = SeoScorerService.score_title(features.title)
        description_score = SeoScorerService.score_description(features.meta_description)
        keywords_score = SeoScorerService.score_keywords(features.meta_keywords)
        heading_score = SeoScorerService.score_headings(features.headings)
        image_score = SeoScorerService.score_images(features.images)
        performance_score = SeoScorerService.score_performance(features.performance.load_time)

        total = (
            title_score
            + description_score
            + keywords_score
            + heading_score
            + image_score
            + performance_score
        )
        issues, recommendations = generate_analysis_results(features)

        return ScoreBreakdown(
            title_score=title_score,
            description_score=description_score,
            keywords_score=keywords_score,
            heading_score=heading_score,
            image_score=image_score,
            performance_score=performance_score,
            total_score=min(total, 100),
            issues=issues,
            recommendations=recommendations,
        )

    @staticmethod
    def score_title(title) -> int:
        """0-30: length tier (max 20) plus vocabulary bonuses (max 10)."""
        if not title:
            return 0

        length = len(title)
        if 30 <= length <= 60:
            length_score = 20
        elif 25 <= length <= 65:
            length_score = 15
        elif 15 <= length <= 70:
            length_score = 10
        else:
            length_score = 5

        lowered = title.lower()
        keyword_score = 0
        if _contains_any(lowered, SEO_TITLE_KEYWORDS):
            keyword_score += 5
        if _contains_any(lowered, BUSINESS_TITLE_KEYWORDS):
            keyword_score += 3
        if _contains_any(lowered, TECH_TITLE_KEYWORDS):
            keyword_score += 2

        return length_score + keyword_score

    @staticmethod
    def score_description(description) -> int:
        """0-25: length tier (max 15) plus call-to-action bonus (max 10)."""
        if not description:
            return 0

        length = len(description)
        if 140 <= length <= 155:
            length_score = 15
        elif 120 <= length <= 160:
            length_score = 12
        elif 100 <= length <= 170:
            length_score = 8
        elif length >= 50:
            length_score = 4
        else:
            length_score = 1

        lowered = description.lower()
        found_ctas = [word for word in CTA_WORDS if word in lowered]
        cta_score = min(len(found_ctas) * 2, 10)

        return length_score + cta_score

    @staticmethod
    def score_keywords(keywords) -> int:
        count = len(split_keywords(keywords))
        if 3 <= count <= 8:
            return 10
        if 1 <= count <= 12:
            return 6
        if count > 0:
            return 3
        return 0

    @staticmethod
    def score_headings(headings: HeadingSet) -> int:
        score = 0

        # H1: exactly one is expected
        if len(headings.h1) == 1:
            h1_length = len(headings.h1[0])
            if 20 <= h1_length <= 70:
                score += 12
            elif h1_length >= 10:
                score += 8
            else:
                score += 4
        elif len(headings.h1) > 1:
            score += 2

        h2_count = len(headings.h2)
        if 2 <= h2_count <= 6:
            score += 5
        elif h2_count == 1:
            score += 3
        elif h2_count > 6:
            score += 2

        if 0 < len(headings.h3) <= 10:
            score += 3

        return score

    @staticmethod
    def score_images(images: ImageStats) -> int:
        if images.total == 0:
            return 8

        alt_ratio = images.with_alt / images.total
        if alt_ratio >= 0.95:
            return 10
        if alt_ratio >= 0.8:
            return 7
        if alt_ratio >= 0.6:
            return 4
        if alt_ratio >= 0.3:
            return 2
        return 0

    @staticmethod
    def score_performance(load_time: int) -> int:
        if load_time <= 800:
            return 5
        if load_time <= 1500:
            return 4
        if load_time <= 2500:
            return 3
        if load_time <= 4000:
            return 2
        if load_time <= 6000:
            return 1
        return 0


def _contains_any(text: str, words) -> bool:
    return any(word in text for word in words)


def features_from_dict(data: Dict[str, Any]) -> FeatureSet:
    """
    Build a FeatureSet from a possibly partial feature dict (camelCase or
    snake_case). `url` defaults to "" and a missing withoutAlt is derived
    from total - withAlt.
    """
    data = dict(data)
    data.setdefault("url", "")

    images = data.get("images")
    if isinstance(images, dict) and "withoutAlt" not in images and "without_alt" not in images:
        images = dict(images)
        total = images.get("total", 0)
        with_alt = images.get("withAlt", images.get("with_alt", 0))
        images["withoutAlt"] = max(total - with_alt, 0)
        data["images"] = images

    return FeatureSet.model_validate(data)


def split_keywords(keywords) -> List[str]:
    if not keywords:
        return []
    return [keyword.strip() for keyword in keywords.split(",") if keyword.strip()]


def calculate_seo_score(features: FeatureInput) -> ScoreBreakdown:
    """Library entry point: accepts a FeatureSet or a bare feature dict."""
    return SeoScorerService.calculate(features)


def generate_analysis_results(features: FeatureSet) -> Tuple[List[str], List[str]]:
    """
    Threshold checks phrased as issues and recommendations.
    Runs independently of the numeric scores.
    """
    issues: List[str] = []
    recommendations: List[str] = []

    title = features.title
    if not title:
        issues.append("Missing title tag")
        recommendations.append("Add a descriptive title tag (30-60 characters)")
    elif len(title) < 30:
        issues.append("Title too short")
        recommendations.append("Expand title to 30-60 characters for better SEO")
    elif len(title) > 60:
        issues.append("Title too long")
        recommendations.append("Shorten title to under 60 characters to prevent truncation")

    description = features.meta_description
    if not description:
        issues.append("Missing meta description")
        recommendations.append("Add a compelling meta description (120-155 characters)")
    elif len(description) < 120:
        issues.append("Meta description too short")
        recommendations.append("Expand meta description to 120-155 characters")
    elif len(description) > 155:
        issues.append("Meta description too long")
        recommendations.append("Shorten meta description to under 155 characters")

    if not features.meta_keywords:
        recommendations.append("Consider adding meta keywords for better content targeting")

    h1_count = len(features.headings.h1)
    if h1_count == 0:
        issues.append("Missing H1 heading")
        recommendations.append("Add a single H1 heading to define page topic")
    elif h1_count > 1:
        issues.append("Multiple H1 headings found")
        recommendations.append("Use only one H1 heading per page")

    if not features.headings.h2:
        recommendations.append("Add H2 headings to structure your content")

    missing_alt = features.images.without_alt
    if features.images.total > 0 and missing_alt > 0:
        issues.append(f"{missing_alt} images missing alt text")
        recommendations.append("Add descriptive alt text to all images for accessibility")

    if features.performance.load_time > SLOW_PAGE_THRESHOLD_MS:
        issues.append("Slow page loading speed")
        recommendations.append("Optimize images and reduce file sizes to improve loading speed")

    return issues, recommendations


def generate_recommendations(analysis: WebsiteAnalysis) -> List[str]:
    """
    Score-driven advice for report views. Each category is only discussed
    when its sub-score is below the "good" mark.
    """
    breakdown = calculate_seo_score(analysis.features())
    recommendations: List[str] = []

    if breakdown.title_score < 20:
        if not analysis.title:
            recommendations.append("Add a title tag to your page")
        elif len(analysis.title) < 30:
            recommendations.append("Title is too short - aim for 30-60 characters")
        elif len(analysis.title) > 60:
            recommendations.append("Title is too long - keep it under 60 characters")

    if breakdown.description_score < 15:
        if not analysis.meta_description:
            recommendations.append("Add a meta description to improve click-through rates")
        elif len(analysis.meta_description) < 120:
            recommendations.append("Meta description is too short - aim for 120-155 characters")
        elif len(analysis.meta_description) > 155:
            recommendations.append("Meta description is too long - keep it under 155 characters")

    if breakdown.keywords_score < 10:
        recommendations.append("Add meta keywords to help search engines understand your content")

    if breakdown.heading_score < 15:
        if not analysis.headings.h1:
            recommendations.append("Add an H1 heading to your page")
        elif len(analysis.headings.h1) > 1:
            recommendations.append("Use only one H1 heading per page")

        if not analysis.headings.h2:
            recommendations.append("Add H2 headings to structure your content")

    if breakdown.image_score < 8 and analysis.images.total > 0:
        missing_alt = analysis.images.without_alt
        if missing_alt > 0:
            plural = "s" if missing_alt > 1 else ""
            recommendations.append(
                f"Add alt text to {missing_alt} image{plural} for better accessibility"
            )

    if breakdown.performance_score < 5:
        recommendations.append("Improve page loading speed for better user experience")
        recommendations.append("Optimize images and reduce file sizes")
        recommendations.append("Consider using a Content Delivery Network (CDN)")

    return recommendations

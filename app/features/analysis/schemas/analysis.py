from typing import List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class AnalysisModel(BaseModel):
    """Immutable record serialized with camelCase keys."""

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class HeadingSet(AnalysisModel):
    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)


class ImageStats(AnalysisModel):
    total: int = Field(default=0, ge=0)
    with_alt: int = Field(default=0, ge=0)
    without_alt: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_counts(self):
        if self.with_alt + self.without_alt != self.total:
            raise ValueError("withAlt + withoutAlt must equal total")
        return self


class LinkStats(AnalysisModel):
    internal: int = Field(default=0, ge=0)
    external: int = Field(default=0, ge=0)


class PerformanceStats(AnalysisModel):
    load_time: int = Field(default=0, ge=0, description="Milliseconds")
    size: int = Field(default=0, ge=0, description="Bytes")


class FeatureSet(AnalysisModel):
    """Structural facts extracted from one HTML document"""
    url: str
    title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    headings: HeadingSet = Field(default_factory=HeadingSet)
    images: ImageStats = Field(default_factory=ImageStats)
    links: LinkStats = Field(default_factory=LinkStats)
    performance: PerformanceStats = Field(default_factory=PerformanceStats)


class CategoryScores(AnalysisModel):
    title_score: int = Field(ge=0, le=30)
    description_score: int = Field(ge=0, le=25)
    keywords_score: int = Field(ge=0, le=10)
    heading_score: int = Field(ge=0, le=20)
    image_score: int = Field(ge=0, le=10)
    performance_score: int = Field(ge=0, le=5)
    total_score: int = Field(ge=0, le=100)

    @model_validator(mode="after")
    def check_total(self):
        subtotal = (
            self.title_score
            + self.description_score
            + self.keywords_score
            + self.heading_score
            + self.image_score
            + self.performance_score
        )
        if self.total_score != min(subtotal, 100):
            raise ValueError("totalScore must equal the capped sum of the category scores")
        return self


class ScoreBreakdown(CategoryScores):
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    def category_scores(self) -> CategoryScores:
        return CategoryScores(**self.model_dump(exclude={"issues", "recommendations"}))


class WebsiteAnalysis(FeatureSet):
    """FeatureSet plus its score; the shape returned to callers and cached."""
    seo_score: int = Field(default=0, ge=0, le=100)
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    breakdown: Optional[CategoryScores] = None

    def features(self) -> FeatureSet:
        return FeatureSet(
            **self.model_dump(exclude={"seo_score", "issues", "recommendations", "breakdown"})
        )


class CacheEntry(AnalysisModel):
    url: str
    analysis: WebsiteAnalysis
    timestamp: int = Field(description="Creation time in epoch milliseconds")


class AnalyzeUrlRequest(BaseModel):
    url: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com"
            }
        }

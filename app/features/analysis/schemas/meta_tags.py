from typing import List, Optional

from pydantic import Field

from app.features.analysis.schemas.analysis import AnalysisModel


class GeneratedMetaTags(AnalysisModel):
    """Meta tag copy produced by the generation workflow"""
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None


class MetaTagValidation(AnalysisModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)


class MetaTagPreview(AnalysisModel):
    validation: MetaTagValidation
    html: str

"""
GEO Strategist - Data Models

Records shared by the adapters, the session controller and the API.
Field names are snake_case in Python; to_dict() emits the camelCase
wire names the model is prompted with.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List


# =============================================================================
# ENUMS
# =============================================================================


class OpportunityType(str, Enum):
    """Kind of page a content gap calls for."""
    BLOG = "blog"
    PRODUCT_CATEGORY = "product_category"
    LANDING_PAGE = "landing_page"


class Difficulty(str, Enum):
    """Estimated effort to rank for an opportunity."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ApplicationStatus(str, Enum):
    """Top-level status of the strategist session."""
    IDLE = "Idle"
    ANALYZING = "Analyzing"
    RESULTS = "Results"
    GENERATING_CONTENT = "GeneratingContent"
    ERROR = "Error"


# =============================================================================
# RECORDS
# =============================================================================


DEFAULT_SCORE = 50


@dataclass
class Competitor:
    """An organic competitor of the analyzed site."""
    name: str
    url: str
    top_keywords: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    visibility_score: int = DEFAULT_SCORE  # 0-100
    blog_themes: List[str] = field(default_factory=list)

    @property
    def headline_strength(self) -> str:
        return self.strengths[0] if self.strengths else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "topKeywords": list(self.top_keywords),
            "strengths": list(self.strengths),
            "visibilityScore": self.visibility_score,
            "blogThemes": list(self.blog_themes),
        }


@dataclass
class Opportunity:
    """A topic competitors cover that the analyzed site does not."""
    id: str
    title: str
    type: OpportunityType
    difficulty: Difficulty
    reason: str
    target_keyword: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "difficulty": self.difficulty.value,
            "reason": self.reason,
            "targetKeyword": self.target_keyword,
        }


@dataclass
class AnalysisResult:
    """Normalized competitive analysis for one website."""
    url: str
    visibility_score: int = DEFAULT_SCORE  # 0-100, own site
    categories: List[str] = field(default_factory=list)
    blog_themes: List[str] = field(default_factory=list)  # empty = no blog detected
    competitors: List[Competitor] = field(default_factory=list)
    opportunities: List[Opportunity] = field(default_factory=list)

    @property
    def has_blog(self) -> bool:
        return bool(self.blog_themes)

    def find_opportunity(self, opportunity_id: str) -> Opportunity:
        """
        Look up an opportunity by id.

        Raises:
            KeyError: If the id is not part of this result
        """
        for opportunity in self.opportunities:
            if opportunity.id == opportunity_id:
                return opportunity
        raise KeyError(opportunity_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "websiteScore": self.visibility_score,
            "categories": list(self.categories),
            "blogThemes": list(self.blog_themes),
            "competitors": [c.to_dict() for c in self.competitors],
            "opportunities": [o.to_dict() for o in self.opportunities],
        }


@dataclass
class ContentDraft:
    """A generated long-form article for one opportunity."""
    title: str
    content: str  # Markdown
    meta_description: str  # intended <= 160 chars, not enforced
    target_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "metaDescription": self.meta_description,
            "targetKeywords": list(self.target_keywords),
        }


__all__ = [
    "OpportunityType",
    "Difficulty",
    "ApplicationStatus",
    "DEFAULT_SCORE",
    "Competitor",
    "Opportunity",
    "AnalysisResult",
    "ContentDraft",
]

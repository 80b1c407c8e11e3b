"""
Dashboard Builder

Derives the data the analysis dashboard shows from an AnalysisResult:
- Summary cards (categories, blog themes, opportunity count)
- Competitor content-strategy cards
- Market visibility ranking (own site vs competitors)
- Content-gap opportunity rows
"""

import logging
from typing import Any, Dict, List

from ..models import AnalysisResult, Competitor, OpportunityType

logger = logging.getLogger(__name__)

OWN_SITE_LABEL = "Your Site"
NO_BLOG_MARKER = "No blog content detected"
NO_COMPETITOR_THEMES_MARKER = "No blog themes detected"

CHART_NAME_LIMIT = 15
CATEGORY_PREVIEW = 3
BLOG_THEME_PREVIEW = 2
COMPETITOR_THEME_PREVIEW = 3

TYPE_LABELS = {
    OpportunityType.BLOG: "Missing Blog",
    OpportunityType.PRODUCT_CATEGORY: "Product Page",
    OpportunityType.LANDING_PAGE: "Landing Page",
}


def truncate_label(name: str, limit: int = CHART_NAME_LIMIT) -> str:
    """Shorten a chart label to `limit` characters plus an ellipsis."""
    return name[:limit] + "..." if len(name) > limit else name


def build_visibility_ranking(result: AnalysisResult) -> List[Dict[str, Any]]:
    """
    Visibility scores for the own site and every competitor,
    highest first. Ties keep the own site ahead.
    """
    entries = [{"name": OWN_SITE_LABEL, "score": result.visibility_score, "is_own_site": True}]
    entries.extend(
        {
            "name": truncate_label(competitor.name),
            "score": competitor.visibility_score,
            "is_own_site": False,
        }
        for competitor in result.competitors
    )
    return sorted(entries, key=lambda entry: entry["score"], reverse=True)


def _competitor_card(competitor: Competitor) -> Dict[str, Any]:
    themes = competitor.blog_themes[:COMPETITOR_THEME_PREVIEW]
    link = competitor.url
    if link and not link.startswith("http"):
        link = f"https://{link}"

    return {
        "name": competitor.name,
        "url": competitor.url,
        "link": link,
        "blog_themes": themes,
        "blog_themes_label": None if themes else NO_COMPETITOR_THEMES_MARKER,
        "headline_strength": competitor.headline_strength,
        "top_keywords": list(competitor.top_keywords),
        "visibility_score": competitor.visibility_score,
    }


def build_dashboard(result: AnalysisResult) -> Dict[str, Any]:
    """
    Build the dashboard view model.

    Every opportunity becomes exactly one row, in the order returned.
    """
    blog_preview = result.blog_themes[:BLOG_THEME_PREVIEW]

    dashboard = {
        "url": result.url,
        "summary": {
            "categories_found": len(result.categories),
            "category_preview": result.categories[:CATEGORY_PREVIEW],
            "blog_theme_count": len(result.blog_themes),
            "blog_theme_preview": blog_preview if blog_preview else [NO_BLOG_MARKER],
            "has_blog": result.has_blog,
            "missing_opportunities": len(result.opportunities),
        },
        "competitors": [_competitor_card(c) for c in result.competitors],
        "visibility_ranking": build_visibility_ranking(result),
        "opportunities": [
            {
                "id": opp.id,
                "title": opp.title,
                "target_keyword": opp.target_keyword,
                "type": opp.type.value,
                "type_label": TYPE_LABELS[opp.type],
                "difficulty": opp.difficulty.value,
                "reason": opp.reason,
            }
            for opp in result.opportunities
        ],
    }

    logger.debug(
        f"Dashboard for {result.url}: {len(dashboard['competitors'])} competitors, "
        f"{len(dashboard['opportunities'])} rows"
    )
    return dashboard

"""
Response Normalizer

Turns free-form Claude text into an AnalysisResult in two stages:

1. Extraction - pick the JSON payload out of the text, in order of precedence:
   a. the inner content of the first fenced code block (```json ... ```)
   b. the substring from the first "{" to the last "}"
   c. the trimmed text as-is
2. Defaulting - parse the payload and give every field a type-correct value,
   independently of the others (scores default to 50, lists to []).

Parsing is all-or-nothing: if the extracted payload is not a JSON object,
MalformedResponse is raised and no partial result is produced.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Union

from ..errors import MalformedResponse
from ..models import (
    DEFAULT_SCORE,
    AnalysisResult,
    Competitor,
    ContentDraft,
    Difficulty,
    Opportunity,
    OpportunityType,
)

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")

DEFAULT_STRENGTH = "Not specified"
DEFAULT_OPPORTUNITY_TITLE = "Untitled opportunity"


# =============================================================================
# EXTRACTION
# =============================================================================


def extract_json_payload(text: str) -> str:
    """
    Extract the most likely JSON payload from model output.

    Args:
        text: Raw response text (may contain prose or code fences)

    Returns:
        Candidate JSON string (not yet parsed)
    """
    fenced = CODE_FENCE_PATTERN.search(text)
    if fenced:
        return fenced.group(1).strip()

    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        return text[first_brace:last_brace + 1]

    return text.strip()


def parse_analysis_payload(text: str, requested_url: str = "") -> AnalysisResult:
    """
    Extract, parse and normalize an analysis response.

    Args:
        text: Raw response text from Claude
        requested_url: URL that was analyzed (fallback for a missing "url")

    Returns:
        Fully populated AnalysisResult

    Raises:
        MalformedResponse: If no JSON object can be parsed
    """
    payload = extract_json_payload(text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(f"Analysis JSON parse failed: {e}")
        raise MalformedResponse(raw_text=text) from e

    if not isinstance(data, dict):
        logger.warning(f"Analysis payload is {type(data).__name__}, expected object")
        raise MalformedResponse(raw_text=text)

    return normalize_analysis(data, requested_url)


# =============================================================================
# DEFAULTING
# =============================================================================


def normalize_analysis(
    data: Union[Dict[str, Any], AnalysisResult],
    requested_url: str = "",
) -> AnalysisResult:
    """
    Fill safe defaults for every field of a parsed analysis.

    Normalizing an already-normalized result yields an equal result.
    """
    if isinstance(data, AnalysisResult):
        data = data.to_dict()

    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        url = requested_url

    competitors = [
        _normalize_competitor(item)
        for item in _as_list(data.get("competitors"))
        if isinstance(item, dict)
    ]

    return AnalysisResult(
        url=url,
        visibility_score=_as_score(data.get("websiteScore")),
        categories=_as_string_list(data.get("categories")),
        blog_themes=_as_string_list(data.get("blogThemes")),
        competitors=competitors,
        opportunities=_normalize_opportunities(_as_list(data.get("opportunities"))),
    )


def _normalize_competitor(item: Dict[str, Any]) -> Competitor:
    url = _as_text(item.get("url"))
    strengths = _as_string_list(item.get("strengths")) or [DEFAULT_STRENGTH]

    return Competitor(
        name=_as_text(item.get("name")) or url or "Unknown competitor",
        url=url,
        top_keywords=_as_string_list(item.get("topKeywords")),
        strengths=strengths,
        visibility_score=_as_score(item.get("visibilityScore")),
        blog_themes=_as_string_list(item.get("blogThemes")),
    )


def _normalize_opportunities(items: List[Any]) -> List[Opportunity]:
    """Normalize opportunities, keeping ids unique within the result."""
    opportunities = []
    seen_ids = set()

    for item in items:
        if not isinstance(item, dict):
            continue

        opp_id = _as_text(item.get("id"))
        if not opp_id or opp_id in seen_ids:
            counter = len(opportunities) + 1
            opp_id = f"opp_{counter}"
            while opp_id in seen_ids:
                counter += 1
                opp_id = f"opp_{counter}"
        seen_ids.add(opp_id)

        title = _as_text(item.get("title")) or DEFAULT_OPPORTUNITY_TITLE

        opportunities.append(Opportunity(
            id=opp_id,
            title=title,
            type=_as_opportunity_type(item.get("type")),
            difficulty=_as_difficulty(item.get("difficulty")),
            reason=_as_text(item.get("reason")),
            target_keyword=_as_text(item.get("targetKeyword")) or title,
        ))

    return opportunities


# =============================================================================
# DRAFTS
# =============================================================================


def draft_from_dict(data: Any) -> ContentDraft:
    """
    Build a ContentDraft from a schema-constrained response.

    No extraction or defaulting happens on this path; a payload that does
    not match the schema is rejected.

    Raises:
        MalformedResponse: If a required field is missing or mistyped
    """
    if not isinstance(data, dict):
        raise MalformedResponse("Draft payload is not an object")

    for key in ("title", "content", "metaDescription"):
        if not isinstance(data.get(key), str):
            raise MalformedResponse(f"Draft field '{key}' is missing or not a string")

    keywords = data.get("targetKeywords")
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise MalformedResponse("Draft field 'targetKeywords' must be a list of strings")

    return ContentDraft(
        title=data["title"],
        content=data["content"],
        meta_description=data["metaDescription"],
        target_keywords=list(keywords),
    )


# =============================================================================
# HELPERS
# =============================================================================


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_string_list(value: Any) -> List[str]:
    """Keep scalar entries as strings, drop empty and nested ones."""
    return [text for text in (_as_text(item) for item in _as_list(value)) if text]


def _as_score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_SCORE
    if isinstance(value, float) and not math.isfinite(value):
        return DEFAULT_SCORE
    return max(0, min(100, int(round(value))))


def _as_opportunity_type(value: Any) -> OpportunityType:
    try:
        return OpportunityType(_as_text(value).lower())
    except ValueError:
        return OpportunityType.BLOG


def _as_difficulty(value: Any) -> Difficulty:
    text = _as_text(value).capitalize()
    try:
        return Difficulty(text)
    except ValueError:
        return Difficulty.MEDIUM

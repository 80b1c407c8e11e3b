"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import json
import pytest
from typing import Dict, Any, Callable, Optional
from unittest.mock import MagicMock, AsyncMock

from src.analyzer.client import ClaudeClient, ClaudeResponse, TokenUsage
from src.utils.config import get_settings


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Mock Data Fixtures
# ============================================================================

OPPORTUNITY_TOPICS = [
    ("How to Pack a Suitcase", "packing tips", "blog", "Low"),
    ("Carry-On Size Guide by Airline", "carry on size", "blog", "Medium"),
    ("Hard Shell vs Soft Shell Luggage", "hard shell luggage", "blog", "Medium"),
    ("Travel Backpacks", "travel backpack", "product_category", "High"),
    ("Packing Cubes", "packing cubes", "product_category", "Medium"),
    ("Business Travel Luggage", "business luggage", "landing_page", "High"),
]


@pytest.fixture
def sample_analysis_payload() -> Dict[str, Any]:
    """Well-formed analysis: 3 competitors, 22 opportunities."""
    opportunities = []
    for index in range(22):
        title, keyword, opp_type, difficulty = OPPORTUNITY_TOPICS[index % len(OPPORTUNITY_TOPICS)]
        if index >= len(OPPORTUNITY_TOPICS):
            title = f"{title} ({index + 1})"
        opportunities.append({
            "id": f"opp_{index + 1}",
            "title": title,
            "type": opp_type,
            "difficulty": difficulty,
            "reason": "Competitors cover this topic, example.com has no page on it.",
            "targetKeyword": keyword,
        })

    return {
        "url": "https://example.com",
        "websiteScore": 42,
        "categories": ["Suitcases", "Backpacks", "Travel Accessories", "Bags"],
        "blogThemes": ["Packing lists", "Destination guides"],
        "competitors": [
            {
                "name": "Away",
                "url": "awaytravel.com",
                "topKeywords": ["carry on luggage", "suitcase"],
                "strengths": ["Strong brand content", "Large review base"],
                "visibilityScore": 88,
                "blogThemes": ["Travel guides", "Packing hacks", "City guides", "Gear"],
            },
            {
                "name": "Samsonite International",
                "url": "https://www.samsonite.com",
                "topKeywords": ["luggage sets"],
                "strengths": ["Broad product catalog"],
                "visibilityScore": 75,
                "blogThemes": [],
            },
            {
                "name": "Monos",
                "url": "monos.com",
                "topKeywords": ["aluminum suitcase"],
                "strengths": ["Comparison tables"],
                "visibilityScore": 30,
                "blogThemes": ["Sustainability"],
            },
        ],
        "opportunities": opportunities,
    }


@pytest.fixture
def sample_analysis_text(sample_analysis_payload) -> str:
    """Analysis as Claude tends to return it: prose around a fenced block."""
    return (
        "Here is the analysis you asked for.\n\n"
        f"```json\n{json.dumps(sample_analysis_payload, indent=2)}\n```\n\n"
        "Let me know if you need anything else."
    )


@pytest.fixture
def sample_draft_payload() -> Dict[str, Any]:
    """Schema-valid draft as returned through the forced tool call."""
    return {
        "title": "How to Pack a Suitcase Like a Pro",
        "metaDescription": "Packing tips that fit a week into a carry-on.",
        "targetKeywords": ["packing tips", "how to pack", "carry on packing"],
        "content": "Packing well starts with a list.\n\n## Roll, don't fold\n\n- Shirts\n- Trousers",
    }


@pytest.fixture
def make_response() -> Callable[..., ClaudeResponse]:
    """Factory for ClaudeResponse objects."""
    def _make(
        content: str = "",
        tool_input: Optional[Dict[str, Any]] = None,
        success: bool = True,
        error: Optional[str] = None,
    ) -> ClaudeResponse:
        return ClaudeResponse(
            content=content,
            usage=TokenUsage(input_tokens=1200, output_tokens=800),
            model="claude-sonnet-4-20250514",
            stop_reason="end_turn" if success else "error",
            tool_input=tool_input,
            success=success,
            error=error,
        )
    return _make


@pytest.fixture
def mock_claude_client():
    """Mock Claude client for testing without API calls."""
    client = MagicMock()
    client.analyze = AsyncMock()
    client.generate_structured = AsyncMock()
    client.web_search_tool = ClaudeClient.web_search_tool
    client.get_total_cost = MagicMock(return_value=0.0)
    return client


@pytest.fixture
def ready_client(mock_claude_client, make_response, sample_analysis_text, sample_draft_payload):
    """Mock client whose analysis and draft calls both succeed."""
    mock_claude_client.analyze.return_value = make_response(content=sample_analysis_text)
    mock_claude_client.generate_structured.return_value = make_response(
        tool_input=sample_draft_payload
    )
    return mock_claude_client

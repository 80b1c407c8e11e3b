"""
Claude-backed Agents

Two adapters, one per outbound call:

1. SiteAnalysisAgent - site + competitor research, content-gap opportunities
2. ContentDraftAgent - GEO-optimized article for one opportunity

Usage:
    from src.agents import SiteAnalysisAgent, ContentDraftAgent

    agent = SiteAnalysisAgent(claude_client)
    result = await agent.run("https://example.com")
"""

from .base import BaseAgent
from .site_analysis import SiteAnalysisAgent, analyze_website
from .content_draft import (
    ContentDraftAgent,
    DRAFT_FAILURE_MESSAGE,
    DRAFT_SCHEMA,
    generate_optimized_content,
)

__all__ = [
    "BaseAgent",
    "SiteAnalysisAgent",
    "analyze_website",
    "ContentDraftAgent",
    "DRAFT_FAILURE_MESSAGE",
    "DRAFT_SCHEMA",
    "generate_optimized_content",
]

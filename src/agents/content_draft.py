"""
Content Draft Agent

Writes one GEO-optimized article for a chosen content-gap opportunity.

The output is schema-constrained (forced tool call), so the response is
already a JSON object and skips the extraction heuristics used for site
analysis. Every failure is reported with the same generic message.
"""

import logging
import time
from typing import Any, Dict, Optional, TYPE_CHECKING

from ..errors import StrategistError, UpstreamFailure
from ..models import ContentDraft
from ..output.normalizer import draft_from_dict
from ..utils.config import get_settings
from .base import BaseAgent

if TYPE_CHECKING:
    from ..analyzer.client import ClaudeClient

logger = logging.getLogger(__name__)


DRAFT_FAILURE_MESSAGE = "Failed to generate content."

DRAFT_TOOL_NAME = "content_draft"

DRAFT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "metaDescription": {"type": "string"},
        "targetKeywords": {"type": "array", "items": {"type": "string"}},
        "content": {"type": "string"},
    },
    "required": ["title", "metaDescription", "targetKeywords", "content"],
    "additionalProperties": False,
}

CONTENT_DRAFT_PROMPT = """
Act as a world-class SEO Content Writer and expert in GEO (Generative Engine Optimization).

Target Topic: "{topic}"
Target Keyword: "{keyword}"
Content Type: {content_type}

Goal: Create content that ranks in AI Overviews (Google AI Overviews, Gemini, ChatGPT Search, Perplexity) and search engines.

GEO & SEO Strategy:
1. **Direct Answer Optimization**: Start with a clear, concise definition or answer to the core query (approx 40-60 words) immediately after the H1. This targets the "snapshot".
2. **Structured Knowledge**: Use bullet points, numbered lists, and comparison tables. AI models prefer structured data.
3. **Authority & Citations**: Include expert insights or mention statistics to build trust.
4. **Comprehensive Coverage**: Cover related entities and "People Also Ask" questions as H2s or H3s.
5. **Fluency & Simplicity**: Use simple sentence structures. Avoid fluff.
6. **Meta Data Optimization**:
   - **Title Tag**: Create a high-CTR title (under 60 chars) that strictly includes the primary keyword "{keyword}".
   - **Meta Description**: Write a persuasive summary (under 160 chars) that includes the primary keyword "{keyword}" and a clear value proposition.

Format Requirements:
- Use proper Markdown (H1, H2, H3, Bold, Lists, Tables).
- Length: 800-1200 words.

Return the article through the {tool_name} tool with exactly these fields:
- "title": the GEO optimized title
- "metaDescription": the meta description under 160 chars
- "targetKeywords": ["{keyword}", plus 2-4 semantic keywords]
- "content": the full markdown article
"""


class ContentDraftAgent(BaseAgent):
    """
    Content Draft Agent - long-form article for one opportunity.

    Sub-cases are not distinguished: API errors, a missing tool result and
    schema mismatches all raise UpstreamFailure("Failed to generate content.").
    """

    TEMPERATURE = 0.7

    @property
    def name(self) -> str:
        return "content_draft"

    @property
    def display_name(self) -> str:
        return "Content Draft Agent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a senior SEO copywriter who writes for both classic search "
            "results and AI-generated answers. You always respond through the "
            "provided tool."
        )

    def build_prompt(self, topic: str, target_keyword: str, content_type: str) -> str:
        """Render the writing instruction for one opportunity."""
        return CONTENT_DRAFT_PROMPT.format(
            topic=topic,
            keyword=target_keyword,
            content_type=content_type,
            tool_name=DRAFT_TOOL_NAME,
        )

    async def run(self, topic: str, target_keyword: str, content_type: str) -> ContentDraft:
        """
        Draft an article.

        Args:
            topic: Opportunity title
            target_keyword: Primary keyword
            content_type: Opportunity type (blog, product_category, landing_page)

        Returns:
            ContentDraft

        Raises:
            ValueError: If any input is empty
            UpstreamFailure: On any generation failure
        """
        for field_name, value in (
            ("topic", topic),
            ("target_keyword", target_keyword),
            ("content_type", content_type),
        ):
            if not value or not value.strip():
                raise ValueError(f"{field_name} must not be empty")

        settings = get_settings()
        started = time.monotonic()
        logger.info(f"Drafting {content_type} content for '{topic}' ({target_keyword})")

        response = await self.client.generate_structured(
            prompt=self.build_prompt(topic, target_keyword, content_type),
            schema=DRAFT_SCHEMA,
            tool_name=DRAFT_TOOL_NAME,
            description="Submit the finished GEO-optimized article.",
            system=self.system_prompt,
            max_tokens=settings.DRAFT_MAX_TOKENS,
            temperature=self.TEMPERATURE,
        )

        if not response.success:
            logger.error(f"Content generation failed for '{topic}': {response.error}")
            raise UpstreamFailure(DRAFT_FAILURE_MESSAGE)

        try:
            draft = draft_from_dict(response.tool_input)
        except StrategistError as e:
            logger.error(f"Content generation returned an invalid draft for '{topic}': {e}")
            raise UpstreamFailure(DRAFT_FAILURE_MESSAGE) from e

        self._log_run(started, f"'{topic}'")
        return draft


async def generate_optimized_content(
    topic: str,
    target_keyword: str,
    content_type: str,
    client: Optional["ClaudeClient"] = None,
) -> ContentDraft:
    """Convenience function to draft one article."""
    return await ContentDraftAgent(client).run(topic, target_keyword, content_type)

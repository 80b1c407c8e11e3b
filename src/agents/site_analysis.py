"""
Site Analysis Agent

Researches one website with Claude's web search tool:
- Product categories and existing blog themes
- Three organic competitors and their content strategy
- Content-gap opportunities (20+) with difficulty and target keyword

The model answers in free text that should contain one JSON object;
the Response Normalizer turns it into an AnalysisResult.
"""

import logging
import time
from typing import Optional, TYPE_CHECKING

from ..errors import EmptyResponse, UpstreamFailure
from ..models import AnalysisResult
from ..output.normalizer import parse_analysis_payload
from ..utils.config import get_settings
from .base import BaseAgent

if TYPE_CHECKING:
    from ..analyzer.client import ClaudeClient

logger = logging.getLogger(__name__)


MIN_OPPORTUNITIES = 20
COMPETITOR_COUNT = 3

SITE_ANALYSIS_PROMPT = """
I need a comprehensive SEO & Content Strategy analysis for the website: {url}.

Step 1: Analyze the User's Website ({url}).
- Identify its main product categories.
- **CRITICAL**: Check for a /blog, /news, or /insights section. Identify the main topics, themes, or specific articles they currently have. If they have no blog, explicitly note that in the data by returning an empty "blogThemes" array (no blog detected). Never omit the field.

Step 2: Find the top {competitor_count} organic competitors.
- Identify exactly {competitor_count} competitors.
- For each competitor, analyze their **Blog & Content Strategy**. What specific topics are they writing about that drive traffic?
- Identify their top keywords and the reasons they rank well.
- Estimate their search visibility score (0-100).

Step 3: Perform a "Content Gap Analysis" (Focus on Blogs).
- Compare competitor blog themes against {url}'s content.
- Identify specific **Blog Topics** that competitors have written about but {url} is missing.
- **CRITICAL**: Provide a list of **at least {min_opportunities} distinct blog post opportunities** that would help the user rank better.
- Identify missing product categories.
- Tag every opportunity with a difficulty (Low, Medium or High) and one target keyword.

Return the result strictly in the following JSON format. Do not add any conversational text or markdown formatting outside the JSON:
{{
  "url": "{url}",
  "websiteScore": 50,
  "categories": ["Product Category 1", "Product Category 2"],
  "blogThemes": ["Current Blog Theme 1", "Current Blog Theme 2"],
  "competitors": [
    {{
      "name": "Competitor Name",
      "url": "competitor.com",
      "topKeywords": ["keyword1", "keyword2"],
      "strengths": ["Reason they rank well"],
      "visibilityScore": 85,
      "blogThemes": ["Competitor Blog Theme 1", "Competitor Blog Theme 2"]
    }}
  ],
  "opportunities": [
    {{
      "id": "unique_id_1",
      "title": "Specific Blog Title to Write",
      "type": "blog",
      "difficulty": "Medium",
      "reason": "Competitor X covers this topic extensively, you have 0 pages on it.",
      "targetKeyword": "main keyword"
    }}
  ]
}}

Field rules:
- "websiteScore" is your estimated visibility score (0-100) for {url}.
- "blogThemes" is an empty array when no blog is detected.
- "type" is one of "blog", "product_category" or "landing_page".
- Every opportunity "id" is unique.
"""


class SiteAnalysisAgent(BaseAgent):
    """
    Site Analysis Agent - competitive content research for one URL.

    Failure kinds:
    - EmptyResponse: Claude returned no text
    - MalformedResponse: text returned, no JSON object recoverable
    - UpstreamFailure: any API / transport error (message preserved)
    """

    TEMPERATURE = 0.3

    @property
    def name(self) -> str:
        return "site_analysis"

    @property
    def display_name(self) -> str:
        return "Site Analysis Agent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are an SEO and content strategist. You research websites with "
            "web search and answer with a single JSON object, never with prose."
        )

    def build_prompt(self, url: str) -> str:
        """Render the research instruction for one URL."""
        return SITE_ANALYSIS_PROMPT.format(
            url=url,
            competitor_count=COMPETITOR_COUNT,
            min_opportunities=MIN_OPPORTUNITIES,
        )

    async def run(self, url: str) -> AnalysisResult:
        """
        Analyze a website and its competitors.

        Args:
            url: Normalized URL (scheme already present)

        Returns:
            Normalized AnalysisResult

        Raises:
            ValueError: If url is empty
            EmptyResponse, MalformedResponse, UpstreamFailure
        """
        if not url or not url.strip():
            raise ValueError("url must not be empty")

        settings = get_settings()
        started = time.monotonic()
        logger.info(f"Starting site analysis for {url}")

        response = await self.client.analyze(
            prompt=self.build_prompt(url),
            system=self.system_prompt,
            max_tokens=settings.ANALYSIS_MAX_TOKENS,
            temperature=self.TEMPERATURE,
            tools=[self.client.web_search_tool(max_uses=settings.WEB_SEARCH_MAX_USES)],
        )

        if not response.success:
            logger.error(f"Site analysis failed for {url}: {response.error}")
            raise UpstreamFailure(response.error)

        text = response.content
        if not text or not text.strip():
            raise EmptyResponse()

        logger.debug(f"Claude raw response for {url}:\n{text}")

        result = parse_analysis_payload(text, requested_url=url)

        logger.info(
            f"Site analysis for {url}: {len(result.competitors)} competitors, "
            f"{len(result.opportunities)} opportunities"
        )
        self._log_run(started, url)
        return result


async def analyze_website(
    url: str,
    client: Optional["ClaudeClient"] = None,
) -> AnalysisResult:
    """
    Convenience function to run one site analysis.

    Args:
        url: Normalized URL
        client: Claude client (created from settings if omitted)

    Returns:
        AnalysisResult
    """
    return await SiteAnalysisAgent(client).run(url)

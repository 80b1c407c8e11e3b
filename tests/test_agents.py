"""
Test Suite for the Claude-backed Adapters

Tests the site analysis and content draft agents against a mocked client:
- Prompt construction and call parameters
- Translation of failed responses into error kinds
"""

import pytest

from src.agents import (
    ContentDraftAgent,
    DRAFT_FAILURE_MESSAGE,
    DRAFT_SCHEMA,
    SiteAnalysisAgent,
    analyze_website,
    generate_optimized_content,
)
from src.agents.site_analysis import MIN_OPPORTUNITIES
from src.errors import EmptyResponse, MalformedResponse, UpstreamFailure
from src.models import ContentDraft


class TestSiteAnalysisAgent:
    """Tests for the analysis adapter."""

    @pytest.fixture
    def agent(self, mock_claude_client):
        return SiteAnalysisAgent(mock_claude_client)

    def test_agent_identity(self, agent):
        """Agent exposes name and display name."""
        assert agent.name == "site_analysis"
        assert agent.display_name == "Site Analysis Agent"
        assert "JSON" in agent.system_prompt

    def test_prompt_embeds_url_and_counts(self, agent):
        """Prompt names the site, three competitors and the opportunity minimum."""
        prompt = agent.build_prompt("https://example.com")

        assert "https://example.com" in prompt
        assert "exactly 3 competitors" in prompt
        assert f"at least {MIN_OPPORTUNITIES}" in prompt
        assert '"websiteScore"' in prompt
        assert '"blogThemes"' in prompt

    @pytest.mark.asyncio
    async def test_run_returns_normalized_result(
        self, agent, mock_claude_client, make_response, sample_analysis_text
    ):
        """A successful call yields an AnalysisResult."""
        mock_claude_client.analyze.return_value = make_response(content=sample_analysis_text)

        result = await agent.run("https://example.com")

        assert len(result.competitors) == 3
        assert len(result.opportunities) == 22

    @pytest.mark.asyncio
    async def test_run_enables_web_search_at_low_temperature(
        self, agent, mock_claude_client, make_response
    ):
        """The call carries the web search tool and a low temperature."""
        mock_claude_client.analyze.return_value = make_response(content="{}")

        await agent.run("https://example.com")

        kwargs = mock_claude_client.analyze.await_args.kwargs
        assert kwargs["temperature"] <= 0.3
        assert kwargs["max_tokens"] == 16000
        assert kwargs["tools"] == [{
            "type": "web_search_20250305",
            "name": "web_search",
            "max_uses": 10,
        }]
        assert "https://example.com" in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_missing_url_field_uses_requested_url(self, agent, mock_claude_client, make_response):
        """The requested URL fills a missing url field."""
        mock_claude_client.analyze.return_value = make_response(content='{"categories": ["Tea"]}')

        result = await agent.run("https://tea.example")

        assert result.url == "https://tea.example"
        assert result.categories == ["Tea"]

    @pytest.mark.asyncio
    async def test_failed_call_raises_upstream_failure(self, agent, mock_claude_client, make_response):
        """The service's own message is preserved."""
        mock_claude_client.analyze.return_value = make_response(success=False, error="quota exceeded")

        with pytest.raises(UpstreamFailure) as exc_info:
            await agent.run("https://example.com")

        assert str(exc_info.value) == "quota exceeded"

    @pytest.mark.asyncio
    async def test_empty_text_raises_empty_response(self, agent, mock_claude_client, make_response):
        """No text at all is EmptyResponse."""
        mock_claude_client.analyze.return_value = make_response(content="   ")

        with pytest.raises(EmptyResponse):
            await agent.run("https://example.com")

    @pytest.mark.asyncio
    async def test_unparseable_text_raises_malformed(self, agent, mock_claude_client, make_response):
        """Prose without JSON is MalformedResponse."""
        mock_claude_client.analyze.return_value = make_response(content="I cannot browse that site.")

        with pytest.raises(MalformedResponse):
            await agent.run("https://example.com")

    @pytest.mark.asyncio
    async def test_empty_url_is_rejected(self, agent, mock_claude_client):
        """No call is made for an empty URL."""
        with pytest.raises(ValueError):
            await agent.run("")

        mock_claude_client.analyze.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_convenience_function(self, mock_claude_client, make_response):
        """analyze_website() runs the agent once."""
        mock_claude_client.analyze.return_value = make_response(content="{}")

        result = await analyze_website("https://example.com", client=mock_claude_client)

        assert result.visibility_score == 50
        assert mock_claude_client.analyze.await_count == 1


class TestContentDraftAgent:
    """Tests for the draft adapter."""

    @pytest.fixture
    def agent(self, mock_claude_client):
        return ContentDraftAgent(mock_claude_client)

    def test_prompt_embeds_topic_keyword_and_type(self, agent):
        """Prompt carries the three inputs and the GEO constraints."""
        prompt = agent.build_prompt("How to Pack a Suitcase", "packing tips", "blog")

        assert '"How to Pack a Suitcase"' in prompt
        assert '"packing tips"' in prompt
        assert "Content Type: blog" in prompt
        assert "800-1200 words" in prompt
        assert "under 60 chars" in prompt
        assert "under 160 chars" in prompt

    @pytest.mark.asyncio
    async def test_run_returns_draft(self, agent, mock_claude_client, make_response, sample_draft_payload):
        """A schema-valid tool result becomes a ContentDraft."""
        mock_claude_client.generate_structured.return_value = make_response(
            tool_input=sample_draft_payload
        )

        draft = await agent.run("How to Pack a Suitcase", "packing tips", "blog")

        assert isinstance(draft, ContentDraft)
        assert draft.title == sample_draft_payload["title"]

    @pytest.mark.asyncio
    async def test_run_requests_schema_output(
        self, agent, mock_claude_client, make_response, sample_draft_payload
    ):
        """The call is schema-constrained with exactly four fields."""
        mock_claude_client.generate_structured.return_value = make_response(
            tool_input=sample_draft_payload
        )

        await agent.run("How to Pack a Suitcase", "packing tips", "blog")

        kwargs = mock_claude_client.generate_structured.await_args.kwargs
        assert kwargs["schema"] is DRAFT_SCHEMA
        assert set(DRAFT_SCHEMA["required"]) == {"title", "metaDescription", "targetKeywords", "content"}
        assert kwargs["tool_name"] == "content_draft"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 8000

    @pytest.mark.asyncio
    async def test_failed_call_reports_generic_message(self, agent, mock_claude_client, make_response):
        """Service errors are not distinguished."""
        mock_claude_client.generate_structured.return_value = make_response(
            success=False, error="overloaded_error"
        )

        with pytest.raises(UpstreamFailure) as exc_info:
            await agent.run("How to Pack a Suitcase", "packing tips", "blog")

        assert str(exc_info.value) == DRAFT_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_schema_mismatch_reports_generic_message(self, agent, mock_claude_client, make_response):
        """An invalid tool result is reported like any other failure."""
        mock_claude_client.generate_structured.return_value = make_response(
            tool_input={"title": "Only a title"}
        )

        with pytest.raises(UpstreamFailure) as exc_info:
            await agent.run("How to Pack a Suitcase", "packing tips", "blog")

        assert str(exc_info.value) == DRAFT_FAILURE_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("topic,keyword,content_type", [
        ("", "packing tips", "blog"),
        ("How to Pack", "  ", "blog"),
        ("How to Pack", "packing tips", ""),
    ])
    async def test_empty_inputs_are_rejected(self, agent, mock_claude_client, topic, keyword, content_type):
        """All three inputs are required."""
        with pytest.raises(ValueError):
            await agent.run(topic, keyword, content_type)

        mock_claude_client.generate_structured.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_convenience_function(self, mock_claude_client, make_response, sample_draft_payload):
        """generate_optimized_content() runs the agent once."""
        mock_claude_client.generate_structured.return_value = make_response(
            tool_input=sample_draft_payload
        )

        draft = await generate_optimized_content(
            "How to Pack a Suitcase", "packing tips", "blog", client=mock_claude_client
        )

        assert draft.target_keywords == sample_draft_payload["targetKeywords"]

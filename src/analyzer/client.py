"""
Claude API Client

Provides a thin async client for the Claude API, including token
management, cost tracking, web search and schema-constrained output.

API errors are never raised from here: every call returns a
ClaudeResponse and callers decide how to report failures.
"""

import asyncio
import logging
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

import anthropic

from ..utils.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class TokenUsage:
    """Track token usage for cost calculation."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def estimated_cost(self) -> float:
        """Estimate cost based on Claude Sonnet 4 pricing."""
        # Sonnet 4 pricing: $3/1M input, $15/1M output
        input_cost = (self.input_tokens / 1_000_000) * 3.0
        output_cost = (self.output_tokens / 1_000_000) * 15.0
        return input_cost + output_cost


@dataclass
class ClaudeResponse:
    """Response from a Claude call."""
    content: str
    usage: TokenUsage
    model: str
    stop_reason: str
    tool_input: Optional[Dict[str, Any]] = None
    success: bool = True
    error: Optional[str] = None


class ClaudeClient:
    """
    Async client for Claude API.

    Features:
    - Lazy client creation (a missing API key fails the first call)
    - Web search tool
    - Schema-constrained output through a forced tool call
    - Optional per-call timeout
    - Cost tracking per session
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 8000
    TEMPERATURE = 0.3

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Claude client.

        Args:
            api_key: Anthropic API key (defaults to settings / env var)
            model: Model to use (defaults to settings, then Sonnet 4)
            timeout: Seconds to wait for any single call (None = no local deadline)
        """
        settings = get_settings()
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        self.model = model or settings.CLAUDE_MODEL or self.DEFAULT_MODEL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self._async_client: Optional[anthropic.AsyncAnthropic] = None

        # Track cumulative usage
        self.total_usage = TokenUsage()
        self.call_count = 0

    @property
    def async_client(self) -> anthropic.AsyncAnthropic:
        if self._async_client is None:
            self._async_client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._async_client

    @staticmethod
    def web_search_tool(max_uses: int = 5) -> Dict[str, Any]:
        """Server-side web search tool definition."""
        return {
            "type": "web_search_20250305",
            "name": "web_search",
            "max_uses": max_uses,
        }

    async def analyze(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = MAX_TOKENS,
        temperature: float = TEMPERATURE,
        tools: Optional[List[Dict]] = None,
        tool_choice: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> ClaudeResponse:
        """
        Send a prompt to Claude.

        Args:
            prompt: User prompt
            system: System prompt
            max_tokens: Maximum output tokens
            temperature: Sampling temperature
            tools: Optional tools (web_search, custom schema tools)
            tool_choice: Optional tool_choice (forces a tool when set)
            timeout: Overrides the client timeout for this call

        Returns:
            ClaudeResponse with text content, tool input and usage
        """
        deadline = timeout if timeout is not None else self.timeout

        try:
            kwargs = {
                "model": self.model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            }

            if system:
                kwargs["system"] = system

            if tools:
                kwargs["tools"] = tools

            if tool_choice:
                kwargs["tool_choice"] = tool_choice

            call = self.async_client.messages.create(**kwargs)
            if deadline:
                response = await asyncio.wait_for(call, timeout=deadline)
            else:
                response = await call

            # Extract text and the first tool input
            content = ""
            tool_input = None
            for block in response.content:
                if getattr(block, "type", None) == "tool_use" and tool_input is None:
                    tool_input = block.input
                elif hasattr(block, "text"):
                    content += block.text

            usage = TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )
            self.total_usage.input_tokens += usage.input_tokens
            self.total_usage.output_tokens += usage.output_tokens
            self.call_count += 1

            logger.info(
                f"Claude call: {usage.input_tokens} in, {usage.output_tokens} out, "
                f"${usage.estimated_cost:.4f}"
            )

            return ClaudeResponse(
                content=content,
                usage=usage,
                model=self.model,
                stop_reason=response.stop_reason,
                tool_input=tool_input,
            )

        except asyncio.TimeoutError:
            logger.error(f"Claude call timed out after {deadline}s")
            return self._failed(f"Request timed out after {deadline} seconds")

        except anthropic.AnthropicError as e:
            # Includes APIError subclasses and a missing API key
            logger.error(f"Claude API error: {e}")
            return self._failed(self._error_message(e))

    async def generate_structured(
        self,
        prompt: str,
        schema: Dict[str, Any],
        tool_name: str,
        description: str = "",
        system: Optional[str] = None,
        max_tokens: int = MAX_TOKENS,
        temperature: float = TEMPERATURE,
        timeout: Optional[float] = None,
    ) -> ClaudeResponse:
        """
        Ask Claude for output matching a JSON schema.

        The schema is offered as the only tool and the tool is forced,
        so the response carries a parsed object in tool_input instead of text.
        """
        tools = [
            {
                "name": tool_name,
                "description": description or f"Return the {tool_name} result.",
                "input_schema": schema,
            }
        ]

        response = await self.analyze(
            prompt,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
            tools=tools,
            tool_choice={"type": "tool", "name": tool_name},
            timeout=timeout,
        )

        if response.success and response.tool_input is None:
            response.success = False
            response.error = f"Claude did not return a {tool_name} result"

        return response

    def get_total_cost(self) -> float:
        """Get total cost for all calls in this session."""
        return self.total_usage.estimated_cost

    def get_usage_summary(self) -> Dict[str, Any]:
        """Get summary of all API usage."""
        return {
            "total_calls": self.call_count,
            "input_tokens": self.total_usage.input_tokens,
            "output_tokens": self.total_usage.output_tokens,
            "total_tokens": self.total_usage.total_tokens,
            "estimated_cost": self.total_usage.estimated_cost,
        }

    def _failed(self, error: str) -> ClaudeResponse:
        return ClaudeResponse(
            content="",
            usage=TokenUsage(),
            model=self.model,
            stop_reason="error",
            success=False,
            error=error,
        )

    @staticmethod
    def _error_message(error: Exception) -> str:
        """Prefer the API's own error message over the SDK's wrapper text."""
        body = getattr(error, "body", None)
        if isinstance(body, dict):
            detail = body.get("error")
            if isinstance(detail, dict) and detail.get("message"):
                return str(detail["message"])
        return getattr(error, "message", None) or str(error)

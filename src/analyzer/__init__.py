"""
GEO Strategist - Claude access

ClaudeClient wraps the Anthropic async SDK for the two outbound calls:
- Site research (free text, web search enabled)
- Article drafting (schema-constrained via a forced tool)
"""

from .client import ClaudeClient, ClaudeResponse, TokenUsage

__all__ = [
    "ClaudeClient",
    "ClaudeResponse",
    "TokenUsage",
]

"""
Adapter error kinds.

Every failure an adapter reports is one of these. The session controller
only reads str(error); the kind decides nothing beyond the message.
"""

from typing import Optional


class StrategistError(Exception):
    """Base exception for adapter failures."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, raw_text: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.raw_text = raw_text


class EmptyResponse(StrategistError):
    """The upstream call succeeded but returned no text."""

    default_message = "No analysis data received from Claude."


class MalformedResponse(StrategistError):
    """Text was returned but no valid JSON object could be parsed from it."""

    default_message = "Received malformed data from AI agent. Please try again."


class UpstreamFailure(StrategistError):
    """Network, authentication, quota or other service-level failure."""

    default_message = "Failed to analyze website. Please try again."

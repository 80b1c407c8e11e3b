"""
Base Agent Class for GEO Strategist

Both adapters inherit from this base class, which provides:
- Standard interface (name, system prompt, sampling settings)
- Shared Claude client handling
- Timing and cost logging around each run

Architecture:
    BaseAgent (abstract)
    ├── SiteAnalysisAgent   (research prompt, web search, free-text JSON)
    └── ContentDraftAgent   (GEO article prompt, schema-constrained output)
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..analyzer.client import ClaudeClient

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """
    Abstract base class for the Claude-backed adapters.

    Each agent must implement:
    - name: Unique identifier
    - display_name: Human-readable name
    - system_prompt: Persona and constraints
    """

    TEMPERATURE = 0.3

    def __init__(self, client: Optional["ClaudeClient"] = None):
        """
        Initialize agent with Claude client.

        Args:
            client: ClaudeClient instance for API calls (created lazily if omitted)
        """
        self._client = client

    @property
    def client(self) -> "ClaudeClient":
        if self._client is None:
            from ..analyzer.client import ClaudeClient
            self._client = ClaudeClient()
        return self._client

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique agent identifier (e.g., 'site_analysis')."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name (e.g., 'Site Analysis Agent')."""
        pass

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """System prompt with persona and output constraints."""
        pass

    def _log_run(self, started: float, subject: str) -> None:
        """Log duration and session cost after a successful run."""
        elapsed = time.monotonic() - started
        logger.info(
            f"{self.display_name} finished for {subject} in {elapsed:.1f}s "
            f"(session cost ${self.client.get_total_cost():.4f})"
        )

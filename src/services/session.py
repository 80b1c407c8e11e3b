"""
Strategist Session

The application state controller. One StrategySession owns:
- the current state (a tagged union of five variants)
- the AnalysisResult and ContentDraft carried by those variants

State machine:

    Idle ──analyze──▶ Analyzing ──ok──▶ Results
                          │                │ ▲
                          └──fail──▶ Error │ │ ok / fail (notice)
                                           ▼ │
                                    GeneratingContent

    Error ──reset──▶ Idle            Results ──reset──▶ Idle

Only one request is in flight at a time. Every transition check and state
change happens synchronously before the first await, so two callers on the
same event loop cannot both pass the busy check.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Union

from ..agents.content_draft import ContentDraftAgent
from ..agents.site_analysis import SiteAnalysisAgent
from ..analyzer.client import ClaudeClient
from ..models import AnalysisResult, ApplicationStatus, ContentDraft, Opportunity
from ..reporter.dashboard import build_dashboard
from ..utils.urls import normalize_url

logger = logging.getLogger(__name__)


ANALYSIS_FAILED_MESSAGE = "Something went wrong during analysis."
DRAFT_FAILED_NOTICE = "Failed to generate content. Please try again."
ANALYSIS_CANCELLED_MESSAGE = "Analysis was cancelled."
DRAFT_CANCELLED_NOTICE = "Content generation was cancelled."

# (seconds since start, message)
ANALYSIS_LOADING_STEPS = (
    (0.0, "Scanning website for products and blog content..."),
    (2.5, "Analyzing competitor blog strategies..."),
    (5.0, "Identifying content gaps and missing topics..."),
)


class InvalidTransitionError(Exception):
    """The requested action is not allowed in the current state."""


class SessionBusyError(InvalidTransitionError):
    """A request is already in flight."""


# =============================================================================
# STATES
# =============================================================================


@dataclass(frozen=True)
class IdleState:
    status: ClassVar[ApplicationStatus] = ApplicationStatus.IDLE


@dataclass(frozen=True)
class AnalyzingState:
    url: str
    started_at: float = field(default_factory=time.monotonic)
    status: ClassVar[ApplicationStatus] = ApplicationStatus.ANALYZING


@dataclass(frozen=True)
class ResultsState:
    analysis: AnalysisResult
    draft: Optional[ContentDraft] = None
    notice: Optional[str] = None
    status: ClassVar[ApplicationStatus] = ApplicationStatus.RESULTS


@dataclass(frozen=True)
class GeneratingContentState:
    analysis: AnalysisResult
    opportunity: Opportunity
    status: ClassVar[ApplicationStatus] = ApplicationStatus.GENERATING_CONTENT


@dataclass(frozen=True)
class ErrorState:
    message: str
    status: ClassVar[ApplicationStatus] = ApplicationStatus.ERROR


SessionState = Union[IdleState, AnalyzingState, ResultsState, GeneratingContentState, ErrorState]


# =============================================================================
# CONTROLLER
# =============================================================================


class StrategySession:
    """
    Owns the strategist state and drives both adapters.

    Usage:
        session = StrategySession()
        await session.analyze("example.com")
        await session.generate_content(session.analysis.opportunities[0].id)
        session.close_draft()
        session.reset()
    """

    def __init__(
        self,
        analysis_agent: Optional[SiteAnalysisAgent] = None,
        draft_agent: Optional[ContentDraftAgent] = None,
        client: Optional[ClaudeClient] = None,
    ):
        """
        Initialize the session.

        Args:
            analysis_agent: Site analysis adapter (built on `client` if omitted)
            draft_agent: Content draft adapter (built on `client` if omitted)
            client: Shared Claude client for the default adapters
        """
        if analysis_agent is None or draft_agent is None:
            client = client or ClaudeClient()
        self.analysis_agent = analysis_agent or SiteAnalysisAgent(client)
        self.draft_agent = draft_agent or ContentDraftAgent(client)

        self._state: SessionState = IdleState()
        self._pending: Optional[asyncio.Task] = None

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> ApplicationStatus:
        return self._state.status

    @property
    def is_busy(self) -> bool:
        return isinstance(self._state, (AnalyzingState, GeneratingContentState))

    @property
    def analysis(self) -> Optional[AnalysisResult]:
        if isinstance(self._state, (ResultsState, GeneratingContentState)):
            return self._state.analysis
        return None

    @property
    def draft(self) -> Optional[ContentDraft]:
        if isinstance(self._state, ResultsState):
            return self._state.draft
        return None

    @property
    def error_message(self) -> Optional[str]:
        """Full-page error (analysis) or in-place notice (draft generation)."""
        if isinstance(self._state, ErrorState):
            return self._state.message
        if isinstance(self._state, ResultsState):
            return self._state.notice
        return None

    @property
    def view(self) -> str:
        """Which view the client should show."""
        state = self._state
        if isinstance(state, IdleState):
            return "landing"
        if isinstance(state, ErrorState):
            return "error"
        if isinstance(state, ResultsState):
            return "draft" if state.draft is not None else "dashboard"
        return "loading"

    def loading_message(self, now: Optional[float] = None) -> Optional[str]:
        """Progress text for the loading view, None when nothing is pending."""
        state = self._state
        if isinstance(state, AnalyzingState):
            elapsed = (now if now is not None else time.monotonic()) - state.started_at
            message = ANALYSIS_LOADING_STEPS[0][1]
            for threshold, text in ANALYSIS_LOADING_STEPS:
                if elapsed >= threshold:
                    message = text
            return message
        if isinstance(state, GeneratingContentState):
            return f'Drafting optimized content for "{state.opportunity.title}"...'
        return None

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    def begin_analysis(self, raw_url: str) -> str:
        """
        Validate input and enter Analyzing.

        Returns:
            The normalized URL to pass to run_analysis()

        Raises:
            ValueError: If the URL is empty
            SessionBusyError: If a request is in flight
            InvalidTransitionError: If not on the landing view
        """
        self._ensure_idle_for("analysis")
        if not isinstance(self._state, IdleState):
            raise InvalidTransitionError("Reset the session before starting a new analysis")

        url = normalize_url(raw_url)
        self._state = AnalyzingState(url=url)
        logger.info(f"Session: Idle -> Analyzing ({url})")
        return url

    async def run_analysis(self, url: str) -> SessionState:
        """Run the analysis adapter for a session already in Analyzing."""
        if not isinstance(self._state, AnalyzingState) or self._state.url != url:
            raise InvalidTransitionError("run_analysis() requires begin_analysis() first")

        owner = self._claim_pending()
        try:
            result = await self.analysis_agent.run(url)
        except asyncio.CancelledError:
            logger.warning(f"Analysis for {url} was cancelled")
            if self._pending is owner:
                self._state = self._cancelled_state()
            raise
        except Exception as e:
            logger.error(f"Analysis for {url} failed: {e}")
            self._state = ErrorState(message=str(e) or ANALYSIS_FAILED_MESSAGE)
        else:
            self._state = ResultsState(analysis=result)
        finally:
            self._release_pending(owner)

        logger.info(f"Session: Analyzing -> {self.status.value}")
        return self._state

    async def analyze(self, raw_url: str) -> SessionState:
        """Submit a URL and wait for the analysis to finish."""
        url = self.begin_analysis(raw_url)
        return await self.run_analysis(url)

    # =========================================================================
    # CONTENT GENERATION
    # =========================================================================

    def begin_generation(self, opportunity_id: str) -> Opportunity:
        """
        Select an opportunity from the current result and enter GeneratingContent.

        Raises:
            SessionBusyError: If a request is in flight
            InvalidTransitionError: If no analysis result is shown
            KeyError: If the id is not part of the current result
        """
        self._ensure_idle_for("content generation")
        if not isinstance(self._state, ResultsState):
            raise InvalidTransitionError("Content can only be generated from analysis results")

        analysis = self._state.analysis
        opportunity = analysis.find_opportunity(opportunity_id)
        self._state = GeneratingContentState(analysis=analysis, opportunity=opportunity)
        logger.info(f"Session: Results -> GeneratingContent ({opportunity.id})")
        return opportunity

    async def run_generation(self, opportunity: Opportunity) -> SessionState:
        """Run the draft adapter for a session already in GeneratingContent."""
        state = self._state
        if not isinstance(state, GeneratingContentState) or state.opportunity is not opportunity:
            raise InvalidTransitionError("run_generation() requires begin_generation() first")

        owner = self._claim_pending()
        try:
            draft = await self.draft_agent.run(
                opportunity.title,
                opportunity.target_keyword,
                opportunity.type.value,
            )
        except asyncio.CancelledError:
            logger.warning(f"Content generation for {opportunity.id} was cancelled")
            if self._pending is owner:
                self._state = self._cancelled_state()
            raise
        except Exception as e:
            # Draft failures stay on the dashboard instead of the error view
            logger.error(f"Content generation for {opportunity.id} failed: {e}")
            self._state = ResultsState(analysis=state.analysis, notice=DRAFT_FAILED_NOTICE)
        else:
            self._state = ResultsState(analysis=state.analysis, draft=draft)
        finally:
            self._release_pending(owner)

        logger.info(f"Session: GeneratingContent -> Results (view: {self.view})")
        return self._state

    async def generate_content(self, opportunity_id: str) -> SessionState:
        """Generate a draft for one opportunity and wait for it."""
        opportunity = self.begin_generation(opportunity_id)
        return await self.run_generation(opportunity)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def close_draft(self) -> None:
        """Back to the dashboard, discarding the draft."""
        self._ensure_idle_for("navigation")
        if not isinstance(self._state, ResultsState):
            raise InvalidTransitionError("There is no dashboard to return to")
        self._state = ResultsState(analysis=self._state.analysis)

    def reset(self) -> None:
        """Back to the landing view, discarding result and draft."""
        self._ensure_idle_for("reset")
        previous = self.status
        self._state = IdleState()
        logger.info(f"Session: {previous.value} -> Idle")

    def track(self, task: asyncio.Task) -> None:
        """
        Record the task that will run the pending request.

        Lets cancel() reach work that is scheduled but has not started yet.

        Raises:
            InvalidTransitionError: If no request is pending
        """
        if not self.is_busy:
            raise InvalidTransitionError("There is no pending request to track")
        self._pending = task

    def cancel(self) -> bool:
        """
        Cancel the in-flight request, if any.

        The session moves to Error (analysis) or back to Results with a
        notice (generation) right away; the task receives CancelledError.
        """
        task = self._pending
        if task is None or task.done() or not self.is_busy:
            return False

        logger.info(f"Cancelling pending {self.status.value} request")
        self._state = self._cancelled_state()
        self._pending = None
        return task.cancel()

    def _cancelled_state(self) -> SessionState:
        state = self._state
        if isinstance(state, AnalyzingState):
            return ErrorState(message=ANALYSIS_CANCELLED_MESSAGE)
        if isinstance(state, GeneratingContentState):
            return ResultsState(analysis=state.analysis, notice=DRAFT_CANCELLED_NOTICE)
        return state

    def _claim_pending(self) -> Optional[asyncio.Task]:
        """The tracked task, or the current one when nothing was tracked."""
        if self._pending is None:
            self._pending = asyncio.current_task()
        return self._pending

    def _release_pending(self, owner: Optional[asyncio.Task]) -> None:
        if self._pending is owner:
            self._pending = None

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session."""
        analysis = self.analysis
        draft = self.draft
        state = self._state

        return {
            "status": self.status.value,
            "view": self.view,
            "loading_message": self.loading_message(),
            "error": state.message if isinstance(state, ErrorState) else None,
            "notice": state.notice if isinstance(state, ResultsState) else None,
            "url": state.url if isinstance(state, AnalyzingState) else (analysis.url if analysis else None),
            "analysis": analysis.to_dict() if analysis else None,
            "dashboard": build_dashboard(analysis) if analysis else None,
            "selected_opportunity": (
                state.opportunity.to_dict() if isinstance(state, GeneratingContentState) else None
            ),
            "draft": draft.to_dict() if draft else None,
        }

    def _ensure_idle_for(self, action: str) -> None:
        if self.is_busy:
            raise SessionBusyError(
                f"Cannot start {action} while {self.status.value} is in progress"
            )

"""
GEO Strategist Services Layer

The session controller that owns application state and orchestrates
the site analysis and content draft adapters.
"""

from .session import (
    StrategySession,
    SessionState,
    IdleState,
    AnalyzingState,
    ResultsState,
    GeneratingContentState,
    ErrorState,
    InvalidTransitionError,
    SessionBusyError,
    ANALYSIS_FAILED_MESSAGE,
    DRAFT_FAILED_NOTICE,
    ANALYSIS_LOADING_STEPS,
)

__all__ = [
    "StrategySession",
    "SessionState",
    "IdleState",
    "AnalyzingState",
    "ResultsState",
    "GeneratingContentState",
    "ErrorState",
    "InvalidTransitionError",
    "SessionBusyError",
    "ANALYSIS_FAILED_MESSAGE",
    "DRAFT_FAILED_NOTICE",
    "ANALYSIS_LOADING_STEPS",
]

"""
Shared dependencies for the API routers.

- get_session: the process-wide StrategySession
- transition_error: rejected transitions as 409 Conflict
- start_in_background: schedule a session coroutine as a cancellable task
"""

import asyncio
import logging
from typing import Awaitable, Optional

from fastapi import BackgroundTasks, HTTPException

from src.services import InvalidTransitionError, StrategySession

logger = logging.getLogger(__name__)

# One strategist session per process (single-user tool)
_session: Optional[StrategySession] = None


def get_session() -> StrategySession:
    """Return the process-wide session, creating it on first use."""
    global _session
    if _session is None:
        _session = StrategySession()
    return _session


def transition_error(e: InvalidTransitionError) -> HTTPException:
    """Map a rejected state transition to 409 Conflict."""
    logger.warning(f"Rejected transition: {e}")
    return HTTPException(status_code=409, detail=str(e))


def start_in_background(
    session: StrategySession,
    work: Awaitable,
    background_tasks: BackgroundTasks,
    label: str,
) -> asyncio.Task:
    """
    Schedule one session coroutine in its own task.

    The task is created and tracked before the 202 goes out, so /api/cancel
    reaches it even if it has not started yet.
    """
    task = asyncio.ensure_future(work)
    session.track(task)
    background_tasks.add_task(wait_for_task, task, label)
    return task


async def wait_for_task(task: asyncio.Task, label: str) -> None:
    """Await a scheduled task; a cancelled task ends quietly."""
    try:
        await task
    except asyncio.CancelledError:
        if not task.cancelled():
            raise
        logger.info(f"Background {label} cancelled")

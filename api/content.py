"""
API Endpoints for Content Drafts

Handles:
1. Starting a draft for one opportunity of the current analysis
2. Closing the draft view (back to the dashboard)
3. Markdown export of the current draft
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from api.deps import get_session, start_in_background, transition_error
from src.reporter import content_disposition, draft_filename, render_markdown
from src.services import InvalidTransitionError, StrategySession

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/content",
    tags=["content"],
)


class ContentRequest(BaseModel):
    """Opportunity to draft, by id."""
    opportunity_id: str = Field(..., description="Opportunity id from the current analysis")


@router.post("", status_code=202)
async def generate_content(
    request: ContentRequest,
    background_tasks: BackgroundTasks,
    session: StrategySession = Depends(get_session),
):
    """
    Start drafting an article for one opportunity.

    Returns immediately; poll /api/state until the view is 'draft' (success)
    or 'dashboard' with a notice (failure).
    """
    try:
        opportunity = session.begin_generation(request.opportunity_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    except InvalidTransitionError as e:
        raise transition_error(e)

    logger.info(f"Content requested for opportunity {opportunity.id}: {opportunity.title}")
    start_in_background(
        session,
        session.run_generation(opportunity),
        background_tasks,
        f"draft for {opportunity.id}",
    )

    return {
        "status": session.status.value,
        "view": session.view,
        "loading_message": session.loading_message(),
        "opportunity": opportunity.to_dict(),
    }


@router.delete("")
async def close_draft(session: StrategySession = Depends(get_session)):
    """Close the draft view and return to the dashboard."""
    try:
        session.close_draft()
    except InvalidTransitionError as e:
        raise transition_error(e)
    return session.snapshot()


@router.get("/markdown")
async def export_markdown(session: StrategySession = Depends(get_session)):
    """Download the current draft as a Markdown file."""
    draft = session.draft
    if draft is None:
        raise HTTPException(status_code=404, detail="No draft to export")

    filename = draft_filename(draft)
    return Response(
        content=render_markdown(draft),
        media_type="text/markdown",
        headers={"Content-Disposition": content_disposition(filename)},
    )

"""
API Endpoint for GEO Strategy Analysis

FastAPI service that backs the strategist front end:
1. Receives a website URL and runs the site analysis in background
2. Exposes the session state (view, loading message, dashboard data)
3. Routes content drafting through api/content.py
4. Supports cancel and reset between analyses

The client polls GET /api/state while a request is in flight.
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from api.content import router as content_router
from api.deps import get_session, start_in_background, transition_error
from src import __version__
from src.services import InvalidTransitionError, SessionBusyError, StrategySession
from src.utils.config import get_settings

# Configure logging to stdout
logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="GEO Strategist",
    description="Competitive content-gap analysis and GEO-optimized drafts powered by Claude",
    version=__version__,
)
app.include_router(content_router)


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Website to analyze. Scheme is optional."""
    url: str = Field(..., description="Website URL, e.g. 'example.com' or 'https://example.com'")


class AcceptedResponse(BaseModel):
    """Returned when a background request has been started."""
    status: str
    view: str
    loading_message: Optional[str] = None
    url: Optional[str] = None


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "GEO Strategist"}


@app.get("/api/health")
async def health(session: StrategySession = Depends(get_session)):
    """Detailed health check including session status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "model": settings.CLAUDE_MODEL,
        "api_key_configured": bool(settings.ANTHROPIC_API_KEY),
        "session_status": session.status.value,
    }


@app.get("/api/state")
async def get_state(session: StrategySession = Depends(get_session)) -> Dict[str, Any]:
    """Current view, loading message, error or notice, analysis and draft."""
    return session.snapshot()


@app.post("/api/analyze", status_code=202, response_model=AcceptedResponse)
async def trigger_analysis(
    request: AnalyzeRequest,
    background_tasks: BackgroundTasks,
    session: StrategySession = Depends(get_session),
):
    """
    Start a site analysis.

    This endpoint:
    1. Normalizes the URL (adds https:// when missing)
    2. Moves the session to Analyzing
    3. Starts background processing
    4. Returns immediately; poll /api/state for the result
    """
    try:
        url = session.begin_analysis(request.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidTransitionError as e:
        raise transition_error(e)

    logger.info(f"Analysis requested: {url}")
    start_in_background(session, session.run_analysis(url), background_tasks, f"analysis of {url}")

    return AcceptedResponse(
        status=session.status.value,
        view=session.view,
        loading_message=session.loading_message(),
        url=url,
    )


@app.post("/api/cancel")
async def cancel_request(session: StrategySession = Depends(get_session)):
    """Cancel the in-flight analysis or draft, if any."""
    cancelled = session.cancel()
    return {"cancelled": cancelled, "status": session.status.value}


@app.post("/api/reset")
async def reset_session(session: StrategySession = Depends(get_session)):
    """Return to the landing view, discarding result and draft."""
    try:
        session.reset()
    except SessionBusyError as e:
        raise transition_error(e)
    return session.snapshot()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.analyze:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

"""
GEO Strategist - Report Views

Turns records into what the client displays:
- Dashboard view model for an AnalysisResult
- Markdown export for a ContentDraft
"""

from .dashboard import build_dashboard, build_visibility_ranking, truncate_label
from .export import render_markdown, draft_filename, content_disposition

__all__ = [
    "build_dashboard",
    "build_visibility_ranking",
    "truncate_label",
    "render_markdown",
    "draft_filename",
    "content_disposition",
]

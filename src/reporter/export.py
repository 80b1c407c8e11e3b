"""
Draft export: markdown body, download file name and header.
"""

from urllib.parse import quote

from ..models import ContentDraft
from ..utils.urls import slugify_title

FALLBACK_FILENAME = "draft.md"


def render_markdown(draft: ContentDraft) -> str:
    """Full article as copied or downloaded: H1 title, blank line, body."""
    return f"# {draft.title}\n\n{draft.content}"


def draft_filename(draft: ContentDraft) -> str:
    return f"{slugify_title(draft.title)}.md"


def content_disposition(filename: str) -> str:
    """
    Attachment header for a download name.

    HTTP headers are latin-1, so the quoted filename keeps only printable
    ASCII without quotes or backslashes; the full UTF-8 name goes in filename*.
    """
    ascii_name = "".join(
        ch for ch in filename if 32 <= ord(ch) < 127 and ch not in '"\\'
    )
    if not ascii_name or ascii_name.startswith("."):
        ascii_name = FALLBACK_FILENAME

    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"

"""
URL and file-name helpers.
"""

import re


def normalize_url(raw_url: str) -> str:
    """
    Normalize user input into an absolute URL.

    Input that already starts with "http" is passed through unchanged,
    anything else gets an "https://" prefix.

    Raises:
        ValueError: If the input is empty
    """
    url = (raw_url or "").strip()
    if not url:
        raise ValueError("A website URL is required")

    if not url.startswith("http"):
        url = f"https://{url}"
    return url


def slugify_title(title: str) -> str:
    """Turn a title into a lowercase, dash-separated file stem."""
    return re.sub(r"\s+", "-", title).lower()

"""Utility modules for GEO Strategist."""

from .config import Settings, get_settings
from .urls import normalize_url, slugify_title

__all__ = [
    "Settings",
    "get_settings",
    "normalize_url",
    "slugify_title",
]

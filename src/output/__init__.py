"""
Output Processing Module

Turns Claude responses into validated records.

Components:
- extract_json_payload: picks the JSON out of free-form text
- parse_analysis_payload: extract + parse + default into an AnalysisResult
- normalize_analysis: field defaulting only
- draft_from_dict: strict conversion of schema-constrained drafts
"""

from .normalizer import (
    extract_json_payload,
    parse_analysis_payload,
    normalize_analysis,
    draft_from_dict,
)

__all__ = [
    "extract_json_payload",
    "parse_analysis_payload",
    "normalize_analysis",
    "draft_from_dict",
]

# plansight/extraction/__init__.py
"""Structured summary extraction: LLM prompt driver and output validator."""

from .parser import (
    ExtractionError,
    extract_json_object,
    iter_balanced_objects,
    parse_structured_summary,
)
from .summary import StructuredSummaryExtractor

__all__ = [
    "ExtractionError",
    "StructuredSummaryExtractor",
    "extract_json_object",
    "iter_balanced_objects",
    "parse_structured_summary",
]

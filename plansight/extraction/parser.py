# plansight/extraction/parser.py
"""
Structured summary validator.

Accepts the raw text of an LLM completion and coerces it into a
PlanningStructuredSummary. Handles a clean top-level JSON object as well as
an object embedded in surrounding prose or code fences.
"""

import json
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from plansight.schemas.summary import PlanningStructuredSummary

logger = logging.getLogger(__name__)

SUMMARY_KEYS = frozenset(PlanningStructuredSummary.model_fields)


class ExtractionError(ValueError):
    """LLM output could not be turned into a structured summary."""


def _find_closing_brace(text: str, start: int) -> int:
    """Index of the brace closing the object opened at text[start], or -1.

    Braces inside JSON strings (including escaped quotes) are ignored.
    """
    depth = 0
    in_string = False
    escape = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if escape:
            escape = False
            continue
        if ch == "\\" and in_string:
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos
    return -1


def iter_balanced_objects(text: str) -> Iterator[str]:
    """
    Yield balanced {...} substrings in order of their opening brace.

    Args:
        text: Arbitrary text possibly containing JSON objects

    Yields:
        Candidate substrings, outermost first for each opening position
    """
    start = text.find("{")
    while start != -1:
        end = _find_closing_brace(text, start)
        if end != -1:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def _first_embedded_object(
    text: str, expected_keys: frozenset[str] | None = None
) -> dict[str, Any]:
    """First decodable object, optionally one sharing a key with expected_keys."""
    for candidate in iter_balanced_objects(text):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(data, dict):
            continue
        if expected_keys is not None and not expected_keys & data.keys():
            continue
        return data

    preview = text[:200].replace("\n", "\\n")
    raise ExtractionError(
        f"LLM did not return valid JSON ({len(text)} chars). Preview: {preview}"
    )


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """
    Find the first JSON object in raw LLM output.

    Tries a strict parse of the trimmed text, then each balanced {...}
    substring in turn.

    Args:
        raw_text: Raw text from LLM

    Returns:
        Parsed JSON object

    Raises:
        ExtractionError: If no JSON object can be decoded
    """
    trimmed = raw_text.strip()
    try:
        data = json.loads(trimmed)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass
    return _first_embedded_object(trimmed)


def _validate(data: Any) -> PlanningStructuredSummary:
    try:
        return PlanningStructuredSummary.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"JSON does not match the summary schema: {e}") from e


def parse_structured_summary(raw_text: str) -> PlanningStructuredSummary:
    """
    Coerce raw LLM text into a PlanningStructuredSummary.

    1. Strict JSON parse of the trimmed text, validated against the schema
    2. Otherwise the first balanced {...} substring that decodes to an object
       carrying at least one summary field

    Args:
        raw_text: LLM completion body

    Returns:
        Validated summary with defaults applied

    Raises:
        ExtractionError: If neither attempt yields an object matching the schema
    """
    if not isinstance(raw_text, str):
        raise ExtractionError(f"Expected text, got {type(raw_text).__name__}")

    trimmed = raw_text.strip()
    try:
        return _validate(json.loads(trimmed))
    except (json.JSONDecodeError, ExtractionError) as e:
        logger.debug(f"Strict summary parse failed: {e}")

    # Nested risk issue objects decode too; skip anything without a summary key
    return _validate(_first_embedded_object(trimmed, SUMMARY_KEYS))

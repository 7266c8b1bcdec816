# plansight/extraction/summary.py
"""
LLM-backed structured summary extraction.

Builds the schema prompt around the document text, calls the configured
client, and validates the reply. A reply that cannot be coerced into a
summary is answered with a corrective follow-up turn, up to max_attempts.
"""

import logging
from typing import Any

from plansight.documents.text import truncate_for_prompt
from plansight.prompts import load_prompt, render_prompt
from plansight.schemas.summary import PlanningStructuredSummary

from .parser import ExtractionError, parse_structured_summary

logger = logging.getLogger(__name__)


class StructuredSummaryExtractor:
    """Extracts a PlanningStructuredSummary from planning document text."""

    def __init__(self, client: Any, max_attempts: int = 2, max_text_chars: int = 60_000):
        """
        Args:
            client:         LLM client exposing async generate(messages)
            max_attempts:   Total LLM calls before giving up on unparseable output
            max_text_chars: Upper bound on document text sent in the prompt
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.client = client
        self.max_attempts = max_attempts
        self.max_text_chars = max_text_chars

    def build_messages(self, text: str, file_name: str) -> list[dict]:
        """Initial system + user messages for a document."""
        body = truncate_for_prompt(text, self.max_text_chars)
        return [
            {"role": "system", "content": load_prompt("summary_system").strip()},
            {
                "role": "user",
                "content": render_prompt("summary", file_name=file_name, text=body),
            },
        ]

    async def extract(self, text: str, file_name: str) -> PlanningStructuredSummary:
        """
        Run extraction for one document.

        Args:
            text:      Plain document text
            file_name: Original file name, quoted in the prompt

        Returns:
            Validated structured summary

        Raises:
            ExtractionError: If every attempt returns unusable output
        """
        messages = self.build_messages(text, file_name)
        last_error: ExtractionError | None = None

        for attempt in range(1, self.max_attempts + 1):
            raw = await self.client.generate(messages=messages)
            try:
                summary = parse_structured_summary(raw)
            except ExtractionError as e:
                last_error = e
                logger.warning(
                    f"Summary extraction for {file_name!r} failed "
                    f"(attempt {attempt}/{self.max_attempts}): {e}"
                )
                messages = messages + [
                    {"role": "assistant", "content": raw},
                    {"role": "user", "content": render_prompt("summary_retry", error=e)},
                ]
                continue

            logger.info(
                f"Extracted summary for {file_name!r}: "
                f"{len(summary.risk_issues)} risk issues, {len(summary.key_issues)} key issues"
            )
            return summary

        raise last_error

# plansight/schemas/summary.py
"""
Schema for the structured planning summary extracted by the LLM.

This is the only place where LLM-generated JSON is force-fit into the
internal contract. Everything stored in the database was written through it.
"""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

RiskCategory = Literal["planning", "delivery", "sales", "cost", "sponsor", "energy", "other"]
RiskLevel = Literal["LOW", "MEDIUM", "HIGH", "EXTREME"]

RISK_CATEGORIES: tuple[str, ...] = (
    "planning",
    "delivery",
    "sales",
    "cost",
    "sponsor",
    "energy",
    "other",
)
RISK_LEVELS: tuple[str, ...] = ("LOW", "MEDIUM", "HIGH", "EXTREME")

LIKERT_MIN = 1
LIKERT_MAX = 5
DEFAULT_LIKERT = 3


def _round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (matches the dashboard's rounding)."""
    return math.floor(value + 0.5)


def clamp_likert(value: object) -> int:
    """
    Clamp a 1-5 rating into range and round it.

    Non-numeric and non-finite values clamp to 1.

    Args:
        value: Raw rating (int, float, numeric string, or anything else)

    Returns:
        Integer in [1, 5]
    """
    if isinstance(value, bool):
        return LIKERT_MIN
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return LIKERT_MIN
    if not isinstance(value, (int, float)):
        return LIKERT_MIN
    if not math.isfinite(value):
        return LIKERT_MIN
    if value < LIKERT_MIN:
        return LIKERT_MIN
    if value > LIKERT_MAX:
        return LIKERT_MAX
    return _round_half_up(value)


class RiskIssue(BaseModel):
    """A single planning or financial risk rated on probability and impact."""

    model_config = ConfigDict(extra="ignore")

    issue: str = Field(description="Concise, specific statement of the risk")

    category: RiskCategory = Field(
        default="planning",
        description="Risk category: planning, delivery, sales, cost, sponsor, energy, other",
    )

    probability: int = Field(
        default=DEFAULT_LIKERT,
        ge=LIKERT_MIN,
        le=LIKERT_MAX,
        description="Likelihood rating 1-5",
    )

    impact: int = Field(
        default=DEFAULT_LIKERT,
        ge=LIKERT_MIN,
        le=LIKERT_MAX,
        description="Severity rating 1-5",
    )

    owner: str | None = Field(default=None, description="Who owns the risk, if known")

    mitigation: str | None = Field(default=None, description="Suggested mitigation, if known")

    @model_validator(mode="before")
    @classmethod
    def _normalize_field_names(cls, data: dict) -> dict:
        """Handle LLM field name variations."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "issue" not in data:
            for alias in ("title", "description", "risk"):
                if alias in data:
                    data["issue"] = data.pop(alias)
                    break
        if "probability" not in data and "likelihood" in data:
            data["probability"] = data.pop("likelihood")
        return data

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> str:
        if value is None:
            return "planning"
        text = str(value).strip().lower()
        if not text:
            return "planning"
        return text if text in RISK_CATEGORIES else "other"

    @field_validator("probability", "impact", mode="before")
    @classmethod
    def _coerce_likert(cls, value: object) -> int:
        if value is None:
            return DEFAULT_LIKERT
        return clamp_likert(value)

    @field_validator("owner", "mitigation", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        if not isinstance(value, str) or not value.strip():
            return None
        return value


_LIST_ITEM_TEXT_KEYS = ("issue", "text", "title", "description", "action", "note")


def _list_item_text(item: object) -> str | None:
    """Text of one array item; objects contribute their first text-like field."""
    if isinstance(item, dict):
        for key in _LIST_ITEM_TEXT_KEYS:
            if isinstance(item.get(key), str):
                item = item[key]
                break
        else:
            return None
    if isinstance(item, bool) or not isinstance(item, (str, int, float)):
        return None
    text = str(item).strip()
    return text or None


def _string_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        texts = (_list_item_text(item) for item in value)
        return [text for text in texts if text]
    return value  # let pydantic report the type error


class PlanningStructuredSummary(BaseModel):
    """Decision-grade summary of a planning document.

    Missing arrays default to empty; an unrecognised risk_level becomes None.
    """

    model_config = ConfigDict(extra="ignore")

    headline: str | None = Field(
        default=None,
        description="One-sentence, decision-grade headline",
    )

    risk_level: RiskLevel | None = Field(
        default=None,
        description="Overall risk level: LOW, MEDIUM, HIGH, EXTREME",
    )

    key_issues: list[str] = Field(
        default_factory=list,
        description="3-5 concise bullet-style issues",
    )

    recommended_actions: list[str] = Field(
        default_factory=list,
        description="3-5 practical next steps",
    )

    timeline_notes: list[str] = Field(
        default_factory=list,
        description="1-3 notes on timelines or fees",
    )

    risk_issues: list[RiskIssue] = Field(
        default_factory=list,
        description="3-6 rated risk issues",
    )

    @field_validator("risk_level", mode="before")
    @classmethod
    def _coerce_risk_level(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip().upper()
        return text if text in RISK_LEVELS else None

    @field_validator("key_issues", "recommended_actions", "timeline_notes", mode="before")
    @classmethod
    def _coerce_string_list(cls, value: object) -> object:
        return _string_list(value)

    @field_validator("risk_issues", mode="before")
    @classmethod
    def _coerce_risk_issues(cls, value: object) -> object:
        if value is None:
            return []
        return value

    @field_validator("headline", mode="before")
    @classmethod
    def _coerce_headline(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

# plansight/schemas/__init__.py
"""Pydantic schemas for LLM-extracted planning data."""

from plansight.schemas.mitigation import MitigationPlan, MitigationStep
from plansight.schemas.summary import (
    RISK_CATEGORIES,
    RISK_LEVELS,
    PlanningStructuredSummary,
    RiskIssue,
    clamp_likert,
)

__all__ = [
    "PlanningStructuredSummary",
    "RiskIssue",
    "MitigationPlan",
    "MitigationStep",
    "RISK_CATEGORIES",
    "RISK_LEVELS",
    "clamp_likert",
]

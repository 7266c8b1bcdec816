# plansight/risk/__init__.py
"""Deterministic risk scoring over probability/impact rated issues."""

from .matrix import (
    RiskIssueScore,
    RiskMatrixSnapshot,
    build_snapshot,
    empty_snapshot,
    rank_issues,
    risk_band_for_index,
)

__all__ = [
    "RiskIssueScore",
    "RiskMatrixSnapshot",
    "build_snapshot",
    "empty_snapshot",
    "rank_issues",
    "risk_band_for_index",
]

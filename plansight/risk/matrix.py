# plansight/risk/matrix.py
"""
Risk matrix builder.

Turns an unordered list of 1-5 rated risk issues into a single risk index,
a categorical band, a ranked shortlist, and a 5x5 probability/impact grid.
Pure computation: no network or storage access, and no input is rejected.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plansight.schemas.summary import (
    LIKERT_MAX,
    PlanningStructuredSummary,
    RiskIssue,
    _round_half_up,
    clamp_likert,
)

logger = logging.getLogger(__name__)

GRID_SIZE = LIKERT_MAX
MAX_SCORE = GRID_SIZE * GRID_SIZE
TOP_ISSUE_COUNT = 3

# Upper bounds (inclusive) for each band
LOW_BAND_MAX = 33
MEDIUM_BAND_MAX = 66

RiskBand = Literal["low", "medium", "high"]


class RiskIssueScore(RiskIssue):
    """A risk issue with its raw and normalized score."""

    score: int = Field(ge=1, le=MAX_SCORE, description="probability x impact (1-25)")

    normalized_score: int = Field(ge=0, le=100, description="score rescaled to 0-100")


class RiskMatrixSnapshot(BaseModel):
    """Aggregate risk view computed from a document summary."""

    model_config = ConfigDict(extra="ignore")

    risk_index: int | None = Field(
        default=None, description="Rounded mean of normalized scores (0-100)"
    )
    risk_band: RiskBand | None = Field(default=None, description="low, medium or high")
    top_issues: list[RiskIssueScore] = Field(
        default_factory=list, description="Up to 3 issues with the highest raw score"
    )
    grid: list[list[int]] = Field(
        default_factory=lambda: _empty_grid(),
        description="Issue counts indexed [probability-1][impact-1]",
    )
    issues: list[RiskIssueScore] = Field(default_factory=list, description="All scored issues")

    @property
    def is_empty(self) -> bool:
        return not self.issues


def _empty_grid() -> list[list[int]]:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def empty_snapshot() -> RiskMatrixSnapshot:
    """Snapshot for a document with no assessable issues."""
    return RiskMatrixSnapshot()


def score_issue(probability: object, impact: object) -> int:
    """Raw score: clamped probability times clamped impact."""
    return clamp_likert(probability) * clamp_likert(impact)


def normalize_score(score: int) -> int:
    """Rescale a 1-25 score to 0-100."""
    return _round_half_up(score / MAX_SCORE * 100)


def risk_band_for_index(index: int) -> RiskBand:
    """Map a risk index to its band. Boundary values fall in the lower band."""
    if index <= LOW_BAND_MAX:
        return "low"
    if index <= MEDIUM_BAND_MAX:
        return "medium"
    return "high"


def rank_issues(issues: Sequence[RiskIssueScore]) -> list[RiskIssueScore]:
    """Sort scored issues by raw score, highest first, keeping input order on ties."""
    return sorted(issues, key=lambda issue: issue.score, reverse=True)


def fallback_issues_from_key_issues(summary: PlanningStructuredSummary) -> list[RiskIssue]:
    """Synthesize mid-rated planning issues from the flat key_issues list."""
    return [
        RiskIssue(issue=text, category="planning", probability=3, impact=3)
        for text in summary.key_issues
    ]


def _coerce_issue(item: object) -> RiskIssue:
    if isinstance(item, RiskIssue):
        return item
    if isinstance(item, str):
        return RiskIssue(issue=item)
    if isinstance(item, Mapping):
        data = dict(item)
        data["issue"] = str(data.get("issue") or data.get("title") or data.get("description") or "")
        for key in ("owner", "mitigation"):
            if not isinstance(data.get(key), str):
                data[key] = None
        return RiskIssue.model_validate(data)
    return RiskIssue(issue=str(item))


def _score(issue: RiskIssue) -> RiskIssueScore:
    probability = clamp_likert(issue.probability)
    impact = clamp_likert(issue.impact)
    score = probability * impact
    return RiskIssueScore(
        issue=issue.issue,
        category=issue.category,
        probability=probability,
        impact=impact,
        owner=issue.owner,
        mitigation=issue.mitigation,
        score=score,
        normalized_score=normalize_score(score),
    )


def _issues_from_source(source: object) -> list[RiskIssue]:
    if source is None:
        return []

    if isinstance(source, Mapping):
        try:
            source = PlanningStructuredSummary.model_validate(source)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed summary for risk matrix: {e.error_count()} errors")
            return []

    if isinstance(source, PlanningStructuredSummary):
        if source.risk_issues:
            return list(source.risk_issues)
        return fallback_issues_from_key_issues(source)

    if isinstance(source, (str, bytes)) or not isinstance(source, Sequence):
        logger.warning(f"Unsupported risk matrix source: {type(source).__name__}")
        return []

    return [_coerce_issue(item) for item in source]


def build_snapshot(
    source: PlanningStructuredSummary | Mapping | Sequence[RiskIssue | Mapping] | None,
) -> RiskMatrixSnapshot:
    """
    Build a risk matrix snapshot.

    Accepts a list of risk issues (models or mappings), a structured summary
    (model or summary-shaped mapping), or None. A summary without risk_issues
    falls back to issues synthesized from key_issues.

    Args:
        source: Issues or summary to aggregate

    Returns:
        RiskMatrixSnapshot; the empty snapshot when there is nothing to score
    """
    issues = [_score(issue) for issue in _issues_from_source(source)]
    if not issues:
        return empty_snapshot()

    total = sum(issue.normalized_score for issue in issues)
    risk_index = _round_half_up(total / len(issues))

    grid = _empty_grid()
    for issue in issues:
        grid[issue.probability - 1][issue.impact - 1] += 1

    return RiskMatrixSnapshot(
        risk_index=risk_index,
        risk_band=risk_band_for_index(risk_index),
        top_issues=rank_issues(issues)[:TOP_ISSUE_COUNT],
        grid=grid,
        issues=issues,
    )

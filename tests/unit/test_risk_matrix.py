# tests/unit/test_risk_matrix.py
"""Tests for the deterministic risk matrix builder."""

import math

import pytest

from plansight.risk.matrix import (
    GRID_SIZE,
    RiskMatrixSnapshot,
    build_snapshot,
    empty_snapshot,
    normalize_score,
    rank_issues,
    risk_band_for_index,
    score_issue,
)
from plansight.schemas.summary import PlanningStructuredSummary, RiskIssue, clamp_likert


def _issue(name: str, probability: int, impact: int, category: str = "planning") -> dict:
    return {"issue": name, "category": category, "probability": probability, "impact": impact}


class TestClampLikert:
    """Rating clamping and rounding."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (0, 1),
            (9, 5),
            (-3, 1),
            (1, 1),
            (5, 5),
            (3, 3),
            (2.5, 3),
            (3.49, 3),
            (4.5, 5),
            ("4", 4),
            (" 2 ", 2),
        ],
    )
    def test_numeric_values(self, raw, expected):
        assert clamp_likert(raw) == expected

    @pytest.mark.parametrize(
        "raw", [float("nan"), float("inf"), float("-inf"), "abc", "", None, [], {}, True]
    )
    def test_non_numeric_and_non_finite_clamp_to_one(self, raw):
        assert clamp_likert(raw) == 1


class TestScoring:
    """Raw and normalized scores."""

    def test_score_is_product_of_clamped_ratings(self):
        assert score_issue(5, 5) == 25
        assert score_issue(0, 9) == 5
        assert score_issue(float("nan"), 4) == 4

    def test_normalized_score_range(self):
        assert normalize_score(1) == 4
        assert normalize_score(9) == 36
        assert normalize_score(25) == 100

    def test_all_scores_within_bounds(self):
        for p in range(1, 6):
            for i in range(1, 6):
                score = score_issue(p, i)
                assert 1 <= score <= 25
                assert 0 <= normalize_score(score) <= 100


class TestRiskBand:
    """Band boundaries are inclusive on the lower band."""

    @pytest.mark.parametrize(
        "index,band",
        [(0, "low"), (33, "low"), (34, "medium"), (66, "medium"), (67, "high"), (100, "high")],
    )
    def test_boundaries(self, index, band):
        assert risk_band_for_index(index) == band


class TestEmptySnapshot:
    """Absent input yields the empty snapshot, never an error."""

    @pytest.mark.parametrize("source", [None, [], (), 42, "not a list"])
    def test_empty_sources(self, source):
        snapshot = build_snapshot(source)
        assert snapshot.risk_index is None
        assert snapshot.risk_band is None
        assert snapshot.top_issues == []
        assert snapshot.issues == []
        assert snapshot.grid == [[0] * GRID_SIZE for _ in range(GRID_SIZE)]
        assert snapshot.is_empty

    def test_empty_snapshot_grid_is_not_shared(self):
        a = empty_snapshot()
        b = empty_snapshot()
        a.grid[0][0] = 7
        assert b.grid[0][0] == 0

    def test_summary_without_issues_is_empty(self):
        snapshot = build_snapshot(PlanningStructuredSummary(headline="Nothing of note"))
        assert snapshot.is_empty

    def test_malformed_summary_mapping_is_empty(self):
        snapshot = build_snapshot({"risk_issues": "nope"})
        assert snapshot.is_empty


class TestBuildSnapshot:
    """Aggregation over scored issues."""

    def test_reference_scenario(self):
        """[{5,5},{1,1},{3,3}] → index 47, medium, top order 25/9/1."""
        snapshot = build_snapshot(
            [_issue("A", 5, 5), _issue("B", 1, 1), _issue("C", 3, 3)]
        )

        assert [i.normalized_score for i in snapshot.issues] == [100, 4, 36]
        assert snapshot.risk_index == 47
        assert snapshot.risk_band == "medium"
        assert [i.score for i in snapshot.top_issues] == [25, 9, 1]
        assert [i.issue for i in snapshot.top_issues] == ["A", "C", "B"]
        assert snapshot.grid[4][4] == 1
        assert snapshot.grid[0][0] == 1
        assert snapshot.grid[2][2] == 1

    def test_single_out_of_range_issue(self):
        """p=0, i=9 clamps to (1, 5): score 5, index 20, low."""
        snapshot = build_snapshot([_issue("Noise", 0, 9)])

        issue = snapshot.issues[0]
        assert (issue.probability, issue.impact) == (1, 5)
        assert issue.score == 5
        assert snapshot.risk_index == 20
        assert snapshot.risk_band == "low"
        assert snapshot.grid[0][4] == 1

    def test_index_rounds_half_up(self):
        """Mean of 4.5 rounds to 5 (not banker's rounding)."""
        issues = [_issue(f"minor {n}", 1, 1) for n in range(7)] + [_issue("pair", 1, 2)]
        snapshot = build_snapshot(issues)
        assert snapshot.risk_index == 5

    def test_ties_keep_input_order(self):
        snapshot = build_snapshot(
            [
                _issue("first", 2, 3),
                _issue("second", 3, 2),
                _issue("small", 1, 1),
                _issue("third", 3, 2),
            ]
        )
        assert [i.issue for i in snapshot.top_issues] == ["first", "second", "third"]

    def test_top_issues_capped_at_three(self):
        snapshot = build_snapshot([_issue(str(n), 4, 4) for n in range(6)])
        assert len(snapshot.top_issues) == 3
        assert len(snapshot.issues) == 6

    def test_grid_counts_every_issue(self):
        issues = [_issue(str(n), (n % 5) + 1, ((n * 2) % 5) + 1) for n in range(11)]
        snapshot = build_snapshot(issues)
        assert sum(sum(row) for row in snapshot.grid) == 11
        assert len(snapshot.grid) == GRID_SIZE
        assert all(len(row) == GRID_SIZE for row in snapshot.grid)

    def test_accepts_models_mappings_and_strings(self):
        snapshot = build_snapshot(
            [
                RiskIssue(issue="model", probability=4, impact=2),
                {"title": "aliased", "likelihood": 2, "impact": 2},
                "bare text",
            ]
        )
        assert [i.issue for i in snapshot.issues] == ["model", "aliased", "bare text"]
        assert [i.score for i in snapshot.issues] == [8, 4, 9]

    def test_mapping_issues_are_clamped(self):
        snapshot = build_snapshot([{"issue": "x", "probability": 7, "impact": -2}])
        assert snapshot.issues[0].score == 5

    def test_missing_ratings_default_to_three(self):
        snapshot = build_snapshot([{"issue": "unrated"}])
        assert snapshot.issues[0].probability == 3
        assert snapshot.issues[0].impact == 3
        assert snapshot.issues[0].category == "planning"

    def test_nan_rating_clamps_to_one(self):
        snapshot = build_snapshot([{"issue": "nan", "probability": math.nan, "impact": 5}])
        assert snapshot.issues[0].probability == 1

    def test_input_is_not_mutated(self):
        raw = [{"issue": "x", "probability": 9, "impact": 0}]
        build_snapshot(raw)
        assert raw == [{"issue": "x", "probability": 9, "impact": 0}]

    def test_invariants_hold(self):
        snapshot = build_snapshot([_issue(str(n), n % 7, 9 - n) for n in range(9)])
        assert 0 <= snapshot.risk_index <= 100
        assert snapshot.risk_band == risk_band_for_index(snapshot.risk_index)
        assert all(1 <= i.score <= 25 for i in snapshot.issues)
        scores = [i.score for i in snapshot.top_issues]
        assert scores == sorted(scores, reverse=True)


class TestSummarySource:
    """Summaries feed the builder directly."""

    def test_uses_risk_issues_when_present(self):
        summary = PlanningStructuredSummary(
            key_issues=["ignored"],
            risk_issues=[RiskIssue(issue="Flooding", category="delivery", probability=4, impact=5)],
        )
        snapshot = build_snapshot(summary)
        assert [i.issue for i in snapshot.issues] == ["Flooding"]
        assert snapshot.risk_index == 80
        assert snapshot.risk_band == "high"

    def test_falls_back_to_key_issues(self):
        summary = PlanningStructuredSummary(key_issues=["Heritage objection", "Flood zone"])
        snapshot = build_snapshot(summary)

        assert [i.issue for i in snapshot.issues] == ["Heritage objection", "Flood zone"]
        assert all(i.category == "planning" for i in snapshot.issues)
        assert all((i.probability, i.impact) == (3, 3) for i in snapshot.issues)
        assert all(i.owner is None and i.mitigation is None for i in snapshot.issues)
        assert snapshot.risk_index == 36
        assert snapshot.risk_band == "medium"
        assert snapshot.grid[2][2] == 2

    def test_accepts_summary_shaped_mapping(self):
        snapshot = build_snapshot(
            {"risk_issues": [{"issue": "Access", "probability": 2, "impact": 2}]}
        )
        assert snapshot.risk_index == 16


class TestRankIssues:
    def test_rank_is_stable_descending(self):
        snapshot = build_snapshot([_issue("a", 1, 2), _issue("b", 5, 1), _issue("c", 2, 1)])
        ranked = rank_issues(snapshot.issues)
        assert [i.issue for i in ranked] == ["b", "a", "c"]

    def test_snapshot_serializes(self):
        snapshot = build_snapshot([_issue("a", 2, 2)])
        restored = RiskMatrixSnapshot.model_validate_json(snapshot.model_dump_json())
        assert restored == snapshot

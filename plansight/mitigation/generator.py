# plansight/mitigation/generator.py
"""
Mitigation plan generation.

Sends the highest-scoring risk issues to the LLM and validates the returned
plan. An unusable reply yields None rather than an error: a missing plan is
a normal outcome the report can render without.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from plansight.extraction.parser import ExtractionError, extract_json_object
from plansight.prompts import load_prompt, render_prompt
from plansight.risk.matrix import RiskMatrixSnapshot, rank_issues
from plansight.schemas.mitigation import MitigationPlan

logger = logging.getLogger(__name__)


class MitigationPlanGenerator:
    """Produces a MitigationPlan for a risk matrix snapshot."""

    def __init__(self, client: Any, max_risks: int = 6):
        """
        Args:
            client:    LLM client exposing async generate(messages)
            max_risks: Number of top-ranked issues included in the prompt
        """
        self.client = client
        self.max_risks = max_risks

    def build_messages(self, snapshot: RiskMatrixSnapshot, site_name: str | None = None) -> list[dict]:
        risks = [
            {
                "issue": issue.issue,
                "category": issue.category,
                "probability": issue.probability,
                "impact": issue.impact,
                "score": issue.score,
                "mitigation_hint": issue.mitigation,
            }
            for issue in rank_issues(snapshot.issues)[: self.max_risks]
        ]
        user = render_prompt(
            "mitigation",
            site_name=site_name or "unnamed site",
            risk_index=snapshot.risk_index,
            risk_band=snapshot.risk_band,
            risks=json.dumps(risks, indent=2),
        )
        return [
            {"role": "system", "content": load_prompt("mitigation_system").strip()},
            {"role": "user", "content": user},
        ]

    async def generate(
        self, snapshot: RiskMatrixSnapshot, site_name: str | None = None
    ) -> MitigationPlan | None:
        """
        Generate a mitigation plan.

        Args:
            snapshot:  Risk matrix for the document
            site_name: Site label used in the prompt

        Returns:
            MitigationPlan, or None when there are no issues or the reply is unusable
        """
        if snapshot.is_empty:
            logger.info("No risk issues; skipping mitigation plan")
            return None

        raw = await self.client.generate(messages=self.build_messages(snapshot, site_name))

        try:
            data = extract_json_object(raw)
        except ExtractionError as e:
            logger.warning(f"Mitigation plan parse failed: {e}")
            return None

        if not data.get("summary") or not isinstance(data.get("steps"), list):
            logger.warning(
                f"Mitigation plan missing summary or steps (keys: {sorted(data.keys())})"
            )
            return None

        try:
            plan = MitigationPlan.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Mitigation plan failed validation: {e.error_count()} errors")
            return None

        logger.info(f"Generated mitigation plan with {len(plan.steps)} steps")
        return plan

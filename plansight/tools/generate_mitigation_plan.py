# plansight/tools/generate_mitigation_plan.py
"""
generate_mitigation_plan tool implementation.

Generates (or reuses) a mitigation plan for a processed document and applies
tier gating to what is returned. The stored plan is always the full plan.
"""

import logging

from fastmcp.exceptions import ToolError

from plansight.access.tiers import gate_mitigation_plan, resolve_tier
from plansight.config.schema import PlansightConfig
from plansight.mitigation.generator import MitigationPlanGenerator
from plansight.models.responses import MitigationPlanResponse
from plansight.models.store import DocumentStore
from plansight.risk.matrix import build_snapshot

from .common import load_document, load_mitigation, load_summary, require_processed

logger = logging.getLogger(__name__)


async def generate_mitigation_plan(
    document_id: str,
    store: DocumentStore,
    client,
    config: PlansightConfig,
    tier: str | None = None,
    regenerate: bool = False,
) -> dict:
    """
    Produce a mitigation plan for a document's top risks.

    Args:
        document_id: Document identifier
        store: Document storage instance
        client: LLM client
        config: Configuration instance
        tier: Account tier override (defaults to config.account.tier)
        regenerate: Ignore a previously stored plan

    Returns:
        MitigationPlanResponse as dict (plan is None when none could be produced)

    Raises:
        ToolError: If the document is unknown, not processed, or the LLM call fails
    """
    record = await load_document(document_id, store)
    require_processed(record)
    account_tier = resolve_tier(tier or config.account.tier)

    plan = None if regenerate else load_mitigation(record)
    if plan is None:
        snapshot = build_snapshot(load_summary(record))
        if snapshot.is_empty:
            return MitigationPlanResponse(
                document_id=record.document_id,
                tier=account_tier.value,
                message="No risk issues to mitigate.",
            ).model_dump()

        generator = MitigationPlanGenerator(client, max_risks=config.mitigation.max_risks)
        try:
            plan = await generator.generate(snapshot, site_name=record.site_id)
        except Exception as e:
            logger.error(f"Mitigation LLM call failed for {record.document_id}", exc_info=True)
            raise ToolError(f"LLM request failed: {e}") from e

        if plan is None:
            return MitigationPlanResponse(
                document_id=record.document_id,
                tier=account_tier.value,
                message="The model did not return a usable mitigation plan. Try again.",
            ).model_dump()

        await store.update(record.document_id, mitigation_json=plan.model_dump_json())

    gated = gate_mitigation_plan(plan, account_tier)
    message = (
        "Preview only: upgrade for the full mitigation plan."
        if gated.truncated
        else None
    )
    logger.info(
        f"Mitigation plan for {record.document_id}: {len(gated.steps)} steps (tier={account_tier.value})"
    )

    response = MitigationPlanResponse(
        document_id=record.document_id,
        tier=account_tier.value,
        plan=gated,
        message=message,
    )
    return response.model_dump()

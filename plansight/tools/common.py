# plansight/tools/common.py
"""Lookups and decoding shared by several tools."""

import logging

from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from plansight.access.tiers import gate_mitigation_plan
from plansight.export.renderer import RiskReportRenderer
from plansight.models.documents import DocumentRecord, DocumentState
from plansight.models.store import DocumentStore
from plansight.risk.matrix import build_snapshot
from plansight.schemas.mitigation import MitigationPlan
from plansight.schemas.summary import PlanningStructuredSummary
from plansight.validation.sanitize import sanitize_document_id

logger = logging.getLogger(__name__)


async def load_document(document_id: str, store: DocumentStore) -> DocumentRecord:
    """
    Validate the ID and fetch the record.

    Raises:
        ToolError: If the ID is malformed or unknown
    """
    sanitized_id = sanitize_document_id(document_id)
    record = await store.get(sanitized_id)
    if not record:
        raise ToolError(
            f"Document '{sanitized_id}' not found. Use list_documents to see available documents."
        )
    return record


def require_processed(record: DocumentRecord) -> None:
    if record.state != DocumentState.PROCESSED:
        detail = f": {record.error}" if record.error else ""
        raise ToolError(
            f"Document '{record.document_id}' is {record.state.value}{detail}. "
            f"Run process_document first."
        )


def load_summary(record: DocumentRecord) -> PlanningStructuredSummary | None:
    """Decode the stored summary; None when absent or unreadable."""
    if not record.summary_json:
        return None
    try:
        return PlanningStructuredSummary.model_validate_json(record.summary_json)
    except ValidationError as e:
        logger.error(f"Stored summary for {record.document_id} is unreadable: {e}")
        return None


def load_mitigation(record: DocumentRecord) -> MitigationPlan | None:
    if not record.mitigation_json:
        return None
    try:
        return MitigationPlan.model_validate_json(record.mitigation_json)
    except ValidationError as e:
        logger.error(f"Stored mitigation plan for {record.document_id} is unreadable: {e}")
        return None


def render_report(record: DocumentRecord, tier: str) -> str:
    """Markdown report for a record, with the mitigation plan gated by tier."""
    summary = load_summary(record)
    mitigation = load_mitigation(record)
    if mitigation is not None:
        mitigation = gate_mitigation_plan(mitigation, tier)
    return RiskReportRenderer().render(record, summary, build_snapshot(summary), mitigation)

# plansight/tools/get_risk_matrix.py
"""
get_risk_matrix tool implementation.

Recomputes the risk matrix snapshot from a document's stored summary.
"""

import logging

from plansight.models.responses import RiskMatrixResponse
from plansight.models.store import DocumentStore
from plansight.risk.matrix import build_snapshot

from .common import load_document, load_summary, require_processed

logger = logging.getLogger(__name__)


async def get_risk_matrix(document_id: str, store: DocumentStore) -> dict:
    """
    Compute the risk matrix for a processed document.

    Args:
        document_id: Document identifier
        store: Document storage instance

    Returns:
        RiskMatrixResponse as dict

    Raises:
        ToolError: If the document is unknown or not processed
    """
    record = await load_document(document_id, store)
    require_processed(record)

    summary = load_summary(record)
    snapshot = build_snapshot(summary)

    logger.info(
        f"Risk matrix for {record.document_id}: index={snapshot.risk_index}, "
        f"band={snapshot.risk_band}, issues={len(snapshot.issues)}"
    )

    response = RiskMatrixResponse(
        document_id=record.document_id,
        file_name=record.file_name,
        headline=summary.headline if summary else None,
        risk_level=summary.risk_level if summary else None,
        matrix=snapshot,
    )
    return response.model_dump()

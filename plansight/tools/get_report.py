# plansight/tools/get_report.py
"""
get_report tool implementation.

Renders the markdown risk report for a document.
"""

import logging

from plansight.models.responses import ReportResponse
from plansight.models.store import DocumentStore

from .common import load_document, render_report

logger = logging.getLogger(__name__)


async def get_report(document_id: str, store: DocumentStore, tier: str = "free") -> dict:
    """
    Render a document's risk report.

    Unprocessed documents render with a note in place of the summary.

    Args:
        document_id: Document identifier
        store: Document storage instance
        tier: Account tier used to gate the mitigation section

    Returns:
        ReportResponse as dict

    Raises:
        ToolError: If the document is unknown
    """
    record = await load_document(document_id, store)
    content = render_report(record, tier)
    logger.info(f"Rendered report for {record.document_id} ({len(content)} chars)")
    return ReportResponse(document_id=record.document_id, content=content).model_dump()

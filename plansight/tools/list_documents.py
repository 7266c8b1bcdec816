# plansight/tools/list_documents.py
"""
list_documents tool implementation.

Lists all uploaded documents with state and risk index.
"""

import logging

from plansight.models.documents import DocumentState
from plansight.models.responses import DocumentSummary, ListDocumentsResponse
from plansight.models.store import DocumentStore
from plansight.risk.matrix import build_snapshot

from .common import load_summary

logger = logging.getLogger(__name__)


async def list_documents(store: DocumentStore) -> dict:
    """
    List all documents, newest first.

    Args:
        store: Document storage instance

    Returns:
        ListDocumentsResponse as dict
    """
    records = await store.list_all()

    summaries = []
    for record in records:
        risk_index = risk_band = None
        if record.state == DocumentState.PROCESSED:
            snapshot = build_snapshot(load_summary(record))
            risk_index, risk_band = snapshot.risk_index, snapshot.risk_band

        summaries.append(
            DocumentSummary(
                document_id=record.document_id,
                file_name=record.file_name,
                site_id=record.site_id,
                state=record.state.value,
                risk_index=risk_index,
                risk_band=risk_band,
                created_at=record.created_at.isoformat(),
            )
        )

    response = ListDocumentsResponse(documents=summaries, total=len(summaries))

    logger.info(f"Listed {len(summaries)} documents")
    return response.model_dump()

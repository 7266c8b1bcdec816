# plansight/tools/process_document.py
"""
process_document tool implementation.

Runs the pipeline for one document: blob bytes → text → structured summary.
The risk matrix is not stored; it is recomputed from the summary on read.
"""

import logging

from fastmcp.exceptions import ToolError

from plansight.config.schema import PlansightConfig
from plansight.documents.blob_store import BlobStore
from plansight.documents.text import TextExtractionError, extract_pdf_text
from plansight.extraction.parser import ExtractionError
from plansight.extraction.summary import StructuredSummaryExtractor
from plansight.models.documents import DocumentRecord, DocumentState
from plansight.models.responses import ProcessDocumentResponse
from plansight.models.store import DocumentStore
from plansight.risk.matrix import build_snapshot
from plansight.schemas.summary import PlanningStructuredSummary

from .common import load_document, load_summary

logger = logging.getLogger(__name__)


async def _fail(store: DocumentStore, document_id: str, message: str) -> ToolError:
    await store.update(document_id, state=DocumentState.FAILED, error=message)
    logger.warning(f"Processing failed for {document_id}: {message}")
    return ToolError(message)


def _response(
    record: DocumentRecord, summary: PlanningStructuredSummary | None, text_chars: int
) -> dict:
    snapshot = build_snapshot(summary)
    return ProcessDocumentResponse(
        document_id=record.document_id,
        state=DocumentState.PROCESSED.value,
        headline=summary.headline if summary else None,
        risk_level=summary.risk_level if summary else None,
        risk_index=snapshot.risk_index,
        risk_band=snapshot.risk_band,
        issue_count=len(snapshot.issues),
        text_chars=text_chars,
    ).model_dump()


async def process_document(
    document_id: str,
    store: DocumentStore,
    blob_store: BlobStore,
    client,
    config: PlansightConfig,
    force: bool = False,
) -> dict:
    """
    Extract text and a structured risk summary for an uploaded document.

    Pending and failed documents are processed; processed documents are
    returned as-is unless force is set.

    Args:
        document_id: Document identifier from upload_document
        store: Document storage instance
        blob_store: Blob storage holding the file bytes
        client: LLM client
        config: Configuration instance
        force: Re-run extraction for an already processed document

    Returns:
        ProcessDocumentResponse as dict

    Raises:
        ToolError: If the document is unknown, busy, or processing fails
    """
    record = await load_document(document_id, store)
    document_id = record.document_id

    if record.state == DocumentState.PROCESSING:
        raise ToolError(f"Document '{document_id}' is already being processed.")

    if record.state == DocumentState.PROCESSED and not force:
        logger.info(f"Document {document_id} already processed; returning stored summary")
        return _response(record, load_summary(record), len(record.extracted_text or ""))

    await store.update(document_id, state=DocumentState.PROCESSING, error=None)

    try:
        data = blob_store.get(record.storage_path)
    except (KeyError, OSError, ValueError) as e:
        raise await _fail(store, document_id, f"Stored file is missing: {e}") from e

    try:
        text = extract_pdf_text(data)
    except TextExtractionError as e:
        raise await _fail(store, document_id, str(e)) from e

    extractor = StructuredSummaryExtractor(
        client,
        max_attempts=config.extraction.max_attempts,
        max_text_chars=config.extraction.max_text_chars,
    )
    try:
        summary = await extractor.extract(text, record.file_name)
    except ExtractionError as e:
        raise await _fail(store, document_id, f"Summary extraction failed: {e}") from e
    except Exception as e:
        logger.error(f"LLM call failed for {document_id}", exc_info=True)
        raise await _fail(store, document_id, f"LLM request failed: {e}") from e

    await store.update(
        document_id,
        state=DocumentState.PROCESSED,
        extracted_text=text,
        summary_json=summary.model_dump_json(),
        mitigation_json=None,
        error=None,
    )
    logger.info(f"Processed document {document_id}")

    return _response(record, summary, len(text))

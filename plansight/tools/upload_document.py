# plansight/tools/upload_document.py
"""
upload_document tool implementation.

Validates the file, stores its bytes in the blob store, and records a
pending document.
"""

import logging
from datetime import datetime, timezone

from fastmcp.exceptions import ToolError

from plansight.access import PROJECT_LIMITS, can_create_project, resolve_tier
from plansight.config.schema import PlansightConfig
from plansight.documents.blob_store import BlobStore, make_storage_key
from plansight.documents.text import PDF_MAGIC
from plansight.models.documents import DocumentRecord, DocumentState, generate_document_id
from plansight.models.responses import UploadDocumentResponse
from plansight.models.store import DocumentStore
from plansight.validation.sanitize import sanitize_file_path, sanitize_site_id

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


async def upload_document(
    file_path: str,
    store: DocumentStore,
    blob_store: BlobStore,
    config: PlansightConfig,
    site_id: str | None = None,
) -> dict:
    """
    Upload a planning document.

    Args:
        file_path: Path to a PDF on disk
        store: Document storage instance
        blob_store: Blob storage for the file bytes
        config: Configuration instance
        site_id: Optional site the document belongs to

    Returns:
        UploadDocumentResponse as dict

    Raises:
        ToolError: If the file is missing, too large, or not a PDF, or a new
            site would exceed the account tier's project limit
    """
    path = sanitize_file_path(file_path, max_bytes=config.storage.max_upload_bytes)
    site_id = sanitize_site_id(site_id)
    if site_id is not None:
        await _check_project_limit(site_id, store, config)

    data = path.read_bytes()
    if not data.startswith(PDF_MAGIC):
        raise ToolError(f"'{path.name}' is not a PDF. Only PDF documents are supported.")

    key = make_storage_key(path.name, site_id=site_id)
    try:
        blob_store.put(key, data)
    except (OSError, ValueError) as e:
        raise ToolError(f"Could not store '{path.name}': {e}")

    document_id = generate_document_id()
    record = DocumentRecord(
        document_id=document_id,
        file_name=path.name,
        storage_path=key,
        file_size=len(data),
        mime_type=PDF_MIME_TYPE,
        site_id=site_id,
        state=DocumentState.PENDING,
        created_at=datetime.now(timezone.utc),
    )

    try:
        await store.add(record)
    except ValueError as e:
        logger.error(f"Document ID collision: {e}")
        raise ToolError(f"Internal error creating document: {e}")

    logger.info(f"Uploaded document {document_id}: {path.name} ({len(data)} bytes)")

    response = UploadDocumentResponse(
        document_id=document_id,
        file_name=path.name,
        storage_path=key,
        file_size=len(data),
        state=DocumentState.PENDING.value,
    )
    return response.model_dump()


async def _check_project_limit(site_id: str, store: DocumentStore, config: PlansightConfig) -> None:
    """Each distinct site counts as one project; reject a new site over the limit."""
    sites = {record.site_id for record in await store.list_all() if record.site_id}
    if site_id in sites:
        return
    tier = resolve_tier(config.account.tier)
    if not can_create_project(tier, len(sites)):
        raise ToolError(
            f"The {tier.value} plan allows {PROJECT_LIMITS[tier]} site(s). "
            f"Upgrade to add '{site_id}'."
        )

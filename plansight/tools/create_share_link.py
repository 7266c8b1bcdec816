# plansight/tools/create_share_link.py
"""
create_share_link tool implementation.

Issues an unguessable, expiring link to a processed document's report.
"""

import logging
from datetime import datetime, timedelta, timezone

from fastmcp.exceptions import ToolError

from plansight.config.schema import PlansightConfig
from plansight.models.documents import ShareRecord, generate_share_token
from plansight.models.responses import ShareLinkResponse
from plansight.models.store import DocumentStore
from plansight.validation.sanitize import sanitize_email, sanitize_expiry_days

from .common import load_document, require_processed

logger = logging.getLogger(__name__)


def share_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/share/{token}"


async def create_share_link(
    document_id: str,
    store: DocumentStore,
    config: PlansightConfig,
    expires_in_days: int | None = None,
    recipient_email: str | None = None,
) -> dict:
    """
    Create a share link for a document's report.

    Args:
        document_id: Document identifier
        store: Document storage instance
        config: Configuration instance
        expires_in_days: Link lifetime (defaults to sharing.default_expiry_days)
        recipient_email: Optional intended recipient

    Returns:
        ShareLinkResponse as dict

    Raises:
        ToolError: If the document is unknown or not processed, or inputs are invalid
    """
    record = await load_document(document_id, store)
    require_processed(record)

    days = sanitize_expiry_days(
        expires_in_days if expires_in_days is not None else config.sharing.default_expiry_days
    )
    email = sanitize_email(recipient_email)

    now = datetime.now(timezone.utc)
    share = ShareRecord(
        token=generate_share_token(),
        document_id=record.document_id,
        expires_at=now + timedelta(days=days),
        created_at=now,
        recipient_email=email,
    )

    try:
        await store.add_share(share)
    except ValueError as e:
        raise ToolError(f"Could not create share link: {e}")

    logger.info(f"Created share link for {record.document_id} (expires in {days} days)")

    response = ShareLinkResponse(
        token=share.token,
        url=share_url(config.sharing.base_url, share.token),
        document_id=record.document_id,
        expires_at=share.expires_at.isoformat(),
        recipient_email=email,
    )
    return response.model_dump()

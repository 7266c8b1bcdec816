# plansight/tools/view_share.py
"""
view_share tool implementation.

Resolves a share token to its report and records the view.
"""

import logging
from datetime import datetime, timezone

from fastmcp.exceptions import ToolError

from plansight.models.responses import SharedReportResponse
from plansight.models.store import DocumentStore
from plansight.validation.sanitize import sanitize_share_token

from .common import render_report

logger = logging.getLogger(__name__)


async def view_share(token: str, store: DocumentStore, tier: str = "free") -> dict:
    """
    Open a shared report.

    Args:
        token: Share token from create_share_link
        store: Document storage instance
        tier: Account tier of the sharer, used to gate the mitigation section

    Returns:
        SharedReportResponse as dict

    Raises:
        ToolError: If the link is unknown, expired, or its document is gone
    """
    token = sanitize_share_token(token)
    share = await store.get_share(token)
    if share is None:
        raise ToolError("Share link not found.")

    now = datetime.now(timezone.utc)
    if share.is_expired(now):
        raise ToolError(f"Share link expired on {share.expires_at.date().isoformat()}.")

    record = await store.get(share.document_id)
    if record is None:
        raise ToolError("The shared document no longer exists.")

    view_count = await store.record_share_view(token, viewed_at=now)
    logger.info(f"Share link for {record.document_id} viewed ({view_count} views)")

    response = SharedReportResponse(
        document_id=record.document_id,
        file_name=record.file_name,
        content=render_report(record, tier),
        expires_at=share.expires_at.isoformat(),
        view_count=view_count,
    )
    return response.model_dump()

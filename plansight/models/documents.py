# plansight/models/documents.py
"""
Document and share records.

Internal models (NOT exposed via MCP) for uploaded planning documents and
the tokenized share links that point at them.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class DocumentState(Enum):
    """Document processing states."""

    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


@dataclass
class DocumentRecord:
    """
    Internal document record (NOT Pydantic - not exposed via MCP).

    The structured summary and mitigation plan are stored as serialized JSON;
    the risk matrix is never stored and is rebuilt from summary_json on demand.
    """

    document_id: str
    file_name: str
    storage_path: str
    file_size: int
    mime_type: str
    state: DocumentState
    created_at: datetime
    site_id: str | None = None
    extracted_text: str | None = None
    summary_json: str | None = None
    mitigation_json: str | None = None
    error: str | None = None  # Error message if state=FAILED
    updated_at: datetime | None = None


@dataclass
class ShareRecord:
    """A read-only link to one document's report."""

    token: str
    document_id: str
    expires_at: datetime
    created_at: datetime
    recipient_email: str | None = None
    view_count: int = 0

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at


def generate_document_id() -> str:
    """
    Generate a unique document ID.

    Returns:
        12-character hex string
    """
    return uuid4().hex[:12]


def generate_share_token() -> str:
    """
    Generate an unguessable share token.

    Returns:
        64-character hex string (32 random bytes)
    """
    return secrets.token_hex(32)

# plansight/validation/sanitize.py
"""
Input sanitization and validation utilities.

Provides path checks, identifier validation, and simple format checks.
Every failure is a ToolError with a message the caller can act on.
"""

import logging
import re
from pathlib import Path

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)

_DOCUMENT_ID_RE = re.compile(r"^[a-zA-Z0-9-]{8,64}$")
_SHARE_TOKEN_RE = re.compile(r"^[0-9a-f]{64}$")
_SITE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_EXPIRY_DAYS = 365


def sanitize_file_path(user_path: str, max_bytes: int | None = None) -> Path:
    """
    Sanitize and validate an upload path.

    Args:
        user_path: User-provided path string
        max_bytes: Optional upper bound on file size

    Returns:
        Resolved absolute Path object

    Raises:
        ToolError: If path doesn't exist, is not a file, is empty or too large
    """
    try:
        resolved = Path(user_path).expanduser().resolve()
    except (ValueError, OSError) as e:
        raise ToolError(f"Invalid path '{user_path}': {e}")

    if not resolved.exists():
        raise ToolError(f"File does not exist: {resolved}")

    if not resolved.is_file():
        raise ToolError(f"Path is not a file: {resolved}")

    size = resolved.stat().st_size
    if size == 0:
        raise ToolError(f"File is empty: {resolved}")
    if max_bytes is not None and size > max_bytes:
        raise ToolError(
            f"File is too large ({size:,} bytes); the limit is {max_bytes:,} bytes"
        )

    logger.info(f"Sanitized upload path: {resolved}")
    return resolved


def sanitize_document_id(document_id: str) -> str:
    """
    Document IDs must be alphanumeric with hyphens only, 8-64 characters.

    Raises:
        ToolError: If document ID format is invalid
    """
    document_id = document_id.strip()
    if not _DOCUMENT_ID_RE.match(document_id):
        raise ToolError(
            f"Invalid document ID '{document_id}': must be 8-64 alphanumeric characters or hyphens"
        )
    return document_id


def sanitize_share_token(token: str) -> str:
    token = token.strip().lower()
    if not _SHARE_TOKEN_RE.match(token):
        raise ToolError("Invalid share token: expected 64 hex characters")
    return token


def sanitize_site_id(site_id: str | None) -> str | None:
    """Blank site IDs become None; others must be 1-64 of [A-Za-z0-9_-]."""
    if site_id is None or not site_id.strip():
        return None
    site_id = site_id.strip()
    if not _SITE_ID_RE.match(site_id):
        raise ToolError(
            f"Invalid site ID '{site_id}': use letters, digits, hyphens or underscores"
        )
    return site_id


def sanitize_email(email: str | None) -> str | None:
    if email is None or not email.strip():
        return None
    email = email.strip()
    if not _EMAIL_RE.match(email):
        raise ToolError(f"Invalid email address '{email}'")
    return email


def sanitize_expiry_days(days: int) -> int:
    if days < 1 or days > MAX_EXPIRY_DAYS:
        raise ToolError(f"Expiry must be between 1 and {MAX_EXPIRY_DAYS} days, got {days}")
    return days

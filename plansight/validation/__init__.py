# plansight/validation/__init__.py
"""Input validation and sanitization utilities."""

from .sanitize import (
    sanitize_document_id,
    sanitize_email,
    sanitize_expiry_days,
    sanitize_file_path,
    sanitize_share_token,
    sanitize_site_id,
)

__all__ = [
    "sanitize_file_path",
    "sanitize_document_id",
    "sanitize_share_token",
    "sanitize_site_id",
    "sanitize_email",
    "sanitize_expiry_days",
]

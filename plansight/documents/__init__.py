# plansight/documents/__init__.py
"""Document bytes storage and PDF text extraction."""

from .blob_store import BlobStore, LocalBlobStore, make_storage_key
from .text import TextExtractionError, extract_pdf_text, truncate_for_prompt

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "TextExtractionError",
    "extract_pdf_text",
    "make_storage_key",
    "truncate_for_prompt",
]

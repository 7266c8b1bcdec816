# plansight/documents/text.py
"""PDF to plain text conversion using pypdf."""

import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class TextExtractionError(ValueError):
    """The document has no readable text."""


def extract_pdf_text(data: bytes) -> str:
    """
    Extract plain text from PDF bytes.

    Page texts are stripped and joined by blank lines. Pages that fail to
    extract are skipped with a warning.

    Args:
        data: Raw PDF file contents

    Returns:
        Document text

    Raises:
        TextExtractionError: If the bytes are not a readable PDF or no page yields text
    """
    if not data:
        raise TextExtractionError("Document is empty")

    try:
        reader = PdfReader(BytesIO(data))
        pages = list(reader.pages)
    except (PdfReadError, ValueError, OSError) as e:
        raise TextExtractionError(f"Could not read PDF: {e}") from e

    page_texts: list[str] = []
    for number, page in enumerate(pages, start=1):
        try:
            text = page.extract_text() or ""
        except Exception as e:
            logger.warning(f"Text extraction failed on page {number}: {e}")
            continue
        if text.strip():
            page_texts.append(text.strip())

    if not page_texts:
        raise TextExtractionError(
            f"No extractable text in PDF ({len(pages)} pages); scanned documents need OCR"
        )

    logger.info(f"Extracted text from {len(page_texts)}/{len(pages)} pages")
    return "\n\n".join(page_texts)


def truncate_for_prompt(text: str, max_chars: int) -> str:
    """Cut text to max_chars, marking the cut so the model knows content is missing."""
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    logger.info(f"Truncating document text from {len(text)} to {max_chars} chars")
    return text[:max_chars] + "\n\n[... document truncated ...]"

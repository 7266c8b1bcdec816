# plansight/models/__init__.py
"""
Data models for plansight.

Provides Pydantic response models, internal document/share records, and
the document store implementations.
"""

from plansight.models.documents import (
    DocumentRecord,
    DocumentState,
    ShareRecord,
    generate_document_id,
    generate_share_token,
)
from plansight.models.responses import (
    DocumentSummary,
    ListDocumentsResponse,
    MitigationPlanResponse,
    ProcessDocumentResponse,
    ReportResponse,
    RiskMatrixResponse,
    SharedReportResponse,
    ShareLinkResponse,
    UploadDocumentResponse,
)
from plansight.models.sqlite_store import SQLiteDocumentStore
from plansight.models.store import DocumentStore

__all__ = [
    # Response models
    "UploadDocumentResponse",
    "ProcessDocumentResponse",
    "RiskMatrixResponse",
    "MitigationPlanResponse",
    "ReportResponse",
    "ShareLinkResponse",
    "SharedReportResponse",
    "DocumentSummary",
    "ListDocumentsResponse",
    # Records and storage
    "DocumentState",
    "DocumentRecord",
    "ShareRecord",
    "DocumentStore",
    "SQLiteDocumentStore",
    "generate_document_id",
    "generate_share_token",
]

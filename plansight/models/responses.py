# plansight/models/responses.py
"""
Pydantic response models for tool outputs.

All tools return structured responses using these models for consistency.
"""

from pydantic import BaseModel, Field

from plansight.risk.matrix import RiskMatrixSnapshot
from plansight.schemas.mitigation import MitigationPlan


class UploadDocumentResponse(BaseModel):
    """Response from upload_document tool."""

    document_id: str = Field(description="Unique document identifier")
    file_name: str = Field(description="Original file name")
    storage_path: str = Field(description="Object key in the blob store")
    file_size: int = Field(ge=0, description="Size in bytes")
    state: str = Field(description="Document state (always 'pending' for new uploads)")
    next_steps: str = Field(
        description="What to do next",
        default="Use process_document with document_id to extract the risk summary",
    )


class ProcessDocumentResponse(BaseModel):
    """Response from process_document tool."""

    document_id: str = Field(description="Document identifier")
    state: str = Field(description="Document state after processing")
    headline: str | None = Field(default=None, description="One-sentence summary")
    risk_level: str | None = Field(default=None, description="LLM-assigned overall level")
    risk_index: int | None = Field(default=None, ge=0, le=100, description="Risk index 0-100")
    risk_band: str | None = Field(default=None, description="low/medium/high")
    issue_count: int = Field(default=0, ge=0, description="Number of scored risk issues")
    text_chars: int = Field(default=0, ge=0, description="Length of extracted text")


class RiskMatrixResponse(BaseModel):
    """Response from get_risk_matrix tool."""

    document_id: str = Field(description="Document identifier")
    file_name: str = Field(description="Original file name")
    headline: str | None = Field(default=None, description="One-sentence summary")
    risk_level: str | None = Field(default=None, description="LLM-assigned overall level")
    matrix: RiskMatrixSnapshot = Field(description="Computed risk matrix snapshot")


class MitigationPlanResponse(BaseModel):
    """Response from generate_mitigation_plan tool."""

    document_id: str = Field(description="Document identifier")
    tier: str = Field(description="Account tier the plan was generated for")
    plan: MitigationPlan | None = Field(
        default=None, description="Mitigation plan, or None when none could be produced"
    )
    message: str | None = Field(default=None, description="Human-readable status message")


class ReportResponse(BaseModel):
    """Response from get_report tool."""

    document_id: str = Field(description="Document identifier")
    content: str = Field(description="Markdown risk report")


class ShareLinkResponse(BaseModel):
    """Response from create_share_link tool."""

    token: str = Field(description="Share token (64 hex chars)")
    url: str = Field(description="Public share URL")
    document_id: str = Field(description="Shared document identifier")
    expires_at: str = Field(description="Expiry timestamp (ISO format)")
    recipient_email: str | None = Field(default=None, description="Intended recipient")


class SharedReportResponse(BaseModel):
    """Response from view_share tool."""

    document_id: str = Field(description="Shared document identifier")
    file_name: str = Field(description="Original file name")
    content: str = Field(description="Markdown risk report")
    expires_at: str = Field(description="Expiry timestamp (ISO format)")
    view_count: int = Field(ge=0, description="Views including this one")


class DocumentSummary(BaseModel):
    """Summary information for a single document (used in list_documents)."""

    document_id: str = Field(description="Document identifier")
    file_name: str = Field(description="Original file name")
    site_id: str | None = Field(default=None, description="Owning site, if any")
    state: str = Field(description="Current document state")
    risk_index: int | None = Field(default=None, ge=0, le=100, description="Risk index if processed")
    risk_band: str | None = Field(default=None, description="Risk band if processed")
    created_at: str = Field(description="Upload timestamp (ISO format)")


class ListDocumentsResponse(BaseModel):
    """Response from list_documents tool."""

    documents: list[DocumentSummary] = Field(
        default_factory=list, description="All uploaded documents"
    )
    total: int = Field(description="Total number of documents")

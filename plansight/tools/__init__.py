# plansight/tools/__init__.py
"""Tool implementations shared by the CLI and the MCP server."""

from .create_share_link import create_share_link
from .generate_mitigation_plan import generate_mitigation_plan
from .get_report import get_report
from .get_risk_matrix import get_risk_matrix
from .list_documents import list_documents
from .process_document import process_document
from .upload_document import upload_document
from .view_share import view_share

__all__ = [
    "create_share_link",
    "generate_mitigation_plan",
    "get_report",
    "get_risk_matrix",
    "list_documents",
    "process_document",
    "upload_document",
    "view_share",
]

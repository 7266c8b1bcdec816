# plansight/server.py
"""
FastMCP server instance with tool registration.

CRITICAL: configure_logging() is called first to prevent stdout pollution.
All logging goes to stderr as JSON.
"""

# Configure logging FIRST before any other imports
from plansight.logging_config import configure_logging

configure_logging()

import logging

from fastmcp import FastMCP

from plansight.config.loader import load_config
from plansight.services import Services
from plansight.tools.create_share_link import create_share_link as _create_share_link
from plansight.tools.generate_mitigation_plan import (
    generate_mitigation_plan as _generate_mitigation_plan,
)
from plansight.tools.get_report import get_report as _get_report
from plansight.tools.get_risk_matrix import get_risk_matrix as _get_risk_matrix
from plansight.tools.list_documents import list_documents as _list_documents
from plansight.tools.process_document import process_document as _process_document
from plansight.tools.upload_document import upload_document as _upload_document
from plansight.tools.view_share import view_share as _view_share

logger = logging.getLogger(__name__)

mcp = FastMCP("plansight")

_config = load_config()
logger.info(f"Loaded configuration: provider={_config.provider}, tier={_config.account.tier}")

# Initialized by __main__.py
_services: Services | None = None


def get_services() -> Services:
    """
    Get the initialized services.

    Raises:
        RuntimeError: If initialize_services() has not run
    """
    if _services is None:
        raise RuntimeError("Services not initialized. Call initialize_services() first.")
    return _services


async def initialize_services(config=None) -> Services:
    """
    Open the document store (schema + crash recovery) before serving tools.

    Args:
        config: PlansightConfig instance (defaults to module-level _config if None)
    """
    global _services

    _services = Services(config or _config)
    await _services.startup()
    return _services


@mcp.tool()
async def upload_document(file_path: str, site_id: str | None = None) -> dict:
    """Upload a planning-application PDF from a local path. Returns a document_id."""
    s = get_services()
    return await _upload_document(
        file_path, store=s.store, blob_store=s.blob_store, config=s.config, site_id=site_id
    )


@mcp.tool()
async def process_document(document_id: str, force: bool = False) -> dict:
    """Extract text and a structured risk summary from an uploaded document."""
    s = get_services()
    return await _process_document(
        document_id,
        store=s.store,
        blob_store=s.blob_store,
        client=s.client,
        config=s.config,
        force=force,
    )


@mcp.tool()
async def get_risk_matrix(document_id: str) -> dict:
    """Risk index, band, top issues and 5x5 probability/impact grid for a processed document."""
    s = get_services()
    return await _get_risk_matrix(document_id, store=s.store)


@mcp.tool()
async def generate_mitigation_plan(document_id: str, regenerate: bool = False) -> dict:
    """Generate a mitigation plan (costs in GBP, timelines in weeks) for the top risks."""
    s = get_services()
    return await _generate_mitigation_plan(
        document_id, store=s.store, client=s.client, config=s.config, regenerate=regenerate
    )


@mcp.tool()
async def get_report(document_id: str) -> dict:
    """Render the markdown risk report for a document."""
    s = get_services()
    return await _get_report(document_id, store=s.store, tier=s.config.account.tier)


@mcp.tool()
async def create_share_link(
    document_id: str,
    expires_in_days: int | None = None,
    recipient_email: str | None = None,
) -> dict:
    """Create an expiring share link for a processed document's report."""
    s = get_services()
    return await _create_share_link(
        document_id,
        store=s.store,
        config=s.config,
        expires_in_days=expires_in_days,
        recipient_email=recipient_email,
    )


@mcp.tool()
async def view_share(token: str) -> dict:
    """Open a shared report by token and record the view."""
    s = get_services()
    return await _view_share(token, store=s.store, tier=s.config.account.tier)


@mcp.tool()
async def list_documents() -> dict:
    """List all uploaded documents with state and risk index."""
    s = get_services()
    return await _list_documents(store=s.store)


logger.info("MCP server initialized with 8 tools")

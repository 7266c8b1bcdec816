# plansight/__main__.py
"""
Entry point for the plansight MCP server.

CRITICAL: Server imports configure_logging() first to prevent stdout pollution.
"""

import asyncio
import logging

# Import server (which configures logging before anything else)
from plansight.server import initialize_services, mcp

logger = logging.getLogger(__name__)


async def main() -> None:
    """Initialize services, then serve tools over stdio until the client disconnects."""
    services = await initialize_services()

    logger.info("Starting MCP server on stdio transport")
    try:
        await mcp.run_stdio_async()
    finally:
        await services.shutdown()


if __name__ == "__main__":
    asyncio.run(main())

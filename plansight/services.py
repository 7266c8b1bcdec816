# plansight/services.py
"""
Service wiring shared by the CLI and the MCP server.

Builds the document store, blob store and LLM client from configuration.
There are no module-level singletons: each surface owns one Services
instance and passes its parts into the tool functions.
"""

import logging
from pathlib import Path

from plansight.config.loader import get_data_dir
from plansight.config.schema import PlansightConfig
from plansight.documents.blob_store import LocalBlobStore
from plansight.llm.factory import LLMClient, create_llm_client
from plansight.models.sqlite_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)

DB_FILE_NAME = "plansight.db"
BLOB_DIR_NAME = "blobs"


def db_path_for(config: PlansightConfig) -> Path:
    return get_data_dir(config) / DB_FILE_NAME


def blob_root_for(config: PlansightConfig) -> Path:
    return get_data_dir(config) / BLOB_DIR_NAME


class Services:
    """
    Owns the stores and the LLM client for one process.

    The LLM client is created on first use so commands that never call a
    model work without provider credentials.
    """

    def __init__(self, config: PlansightConfig) -> None:
        self.config = config
        self.store = SQLiteDocumentStore(str(db_path_for(config)))
        self.blob_store = LocalBlobStore(blob_root_for(config))
        self._client: LLMClient | None = None

    @property
    def client(self) -> LLMClient:
        if self._client is None:
            self._client = create_llm_client(self.config)
            logger.info(f"Created {type(self._client).__name__} for provider={self.config.provider}")
        return self._client

    async def startup(self) -> None:
        """Initialize the database schema and run crash recovery."""
        await self.store.initialize()
        logger.info("Services ready")

    async def shutdown(self) -> None:
        """Checkpoint the database and close the LLM client if it holds connections."""
        await self.store.close()
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()
        self._client = None

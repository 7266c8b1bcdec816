# plansight/models/schema.py
"""
Database schema definition for SQLite document persistence.

Provides DDL for tables, indexes, and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 2

DOCUMENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    file_name TEXT NOT NULL,
    storage_path TEXT NOT NULL,
    file_size INTEGER NOT NULL CHECK(file_size >= 0),
    mime_type TEXT NOT NULL,
    site_id TEXT,
    state TEXT NOT NULL CHECK(state IN ('pending', 'processing', 'processed', 'failed')),
    extracted_text TEXT,
    summary_json TEXT,
    mitigation_json TEXT,
    error TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

DOCUMENTS_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_documents_created ON documents(created_at)"

SHARES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS shares (
    token TEXT PRIMARY KEY,
    document_id TEXT NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
    recipient_email TEXT,
    expires_at TEXT NOT NULL,
    created_at TEXT NOT NULL
)
"""

SHARE_VIEWS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS share_views (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    token TEXT NOT NULL REFERENCES shares(token) ON DELETE CASCADE,
    viewed_at TEXT NOT NULL
)
"""

SHARE_VIEWS_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_share_views_token ON share_views(token)"


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def _migrate_v1_to_v2(db: aiosqlite.Connection) -> None:
    """
    Migrate schema from v1 to v2.

    Changes:
        - Add mitigation_json column to documents table
        - Share tables are created by init_db (IF NOT EXISTS)
    """
    logger.info("Migrating schema from v1 to v2")

    cursor = await db.execute("PRAGMA table_info(documents)")
    columns = await cursor.fetchall()
    column_names = [col[1] for col in columns]

    if "mitigation_json" not in column_names:
        await db.execute("ALTER TABLE documents ADD COLUMN mitigation_json TEXT")
        logger.info("Added mitigation_json column to documents table")


async def init_db(db_path: str) -> None:
    """
    Initialize database schema with WAL mode and optimal settings.

    Handles schema migrations automatically.

    Args:
        db_path: Path to SQLite database file

    Settings:
        - WAL mode: Concurrent reads + writes
        - synchronous=NORMAL: Good durability/performance balance
        - busy_timeout=5000ms: Retry on SQLITE_BUSY
        - foreign_keys=ON: Enforce constraints
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA synchronous=NORMAL")
        await db.execute("PRAGMA busy_timeout=5000")
        await db.execute("PRAGMA foreign_keys=ON")

        await db.execute(DOCUMENTS_TABLE_SQL)
        await db.execute(DOCUMENTS_INDEX_SQL)

        current_version = await _get_schema_version(db)
        if current_version == 1:
            await _migrate_v1_to_v2(db)

        await db.execute(SHARES_TABLE_SQL)
        await db.execute(SHARE_VIEWS_TABLE_SQL)
        await db.execute(SHARE_VIEWS_INDEX_SQL)

        if current_version < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"Schema at v{SCHEMA_VERSION} (was v{current_version})")

        await db.commit()

        logger.info(f"Initialized database at {db_path} (schema v{SCHEMA_VERSION})")

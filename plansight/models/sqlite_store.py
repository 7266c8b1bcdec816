# plansight/models/sqlite_store.py
"""
SQLite-backed document persistence.

Provides async CRUD operations with WAL mode and IMMEDIATE transactions
for crash recovery and concurrent access safety.
"""

import logging
from datetime import datetime, timezone

import aiosqlite

from plansight.models.documents import DocumentRecord, DocumentState, ShareRecord
from plansight.models.schema import init_db
from plansight.models.store import DocumentStore

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "file_name",
    "storage_path",
    "file_size",
    "mime_type",
    "site_id",
    "state",
    "extracted_text",
    "summary_json",
    "mitigation_json",
    "error",
    "updated_at",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_dt(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class SQLiteDocumentStore(DocumentStore):
    """
    Async SQLite-backed document storage.

    Features:
        - WAL mode for concurrent reads/writes
        - IMMEDIATE transactions for write safety
        - Crash recovery (processing → failed on startup)
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite document store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteDocumentStore with path: {db_path}")

    async def initialize(self) -> None:
        """
        Initialize database schema and perform crash recovery.

        Crash recovery: documents left in 'processing' are marked 'failed'
        so they can be processed again.
        """
        await init_db(self._db_path)

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            cursor = await db.execute(
                "UPDATE documents SET state = ?, error = ?, updated_at = ? WHERE state = ?",
                (
                    DocumentState.FAILED.value,
                    "Interrupted during processing",
                    _now_iso(),
                    DocumentState.PROCESSING.value,
                ),
            )
            recovered = cursor.rowcount
            await db.commit()

            if recovered > 0:
                logger.warning(
                    f"Crash recovery: marked {recovered} processing document(s) as failed"
                )

    async def add(self, record: DocumentRecord) -> None:
        """
        Add a document record to the store.

        Args:
            record: DocumentRecord to add

        Raises:
            ValueError: If document_id already exists
        """
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute(
                    "SELECT id FROM documents WHERE id = ?", (record.document_id,)
                )
                if await cursor.fetchone():
                    raise ValueError(f"Document {record.document_id} already exists")

                updated_at = record.updated_at or datetime.now(timezone.utc)
                await db.execute(
                    """
                    INSERT INTO documents (
                        id, file_name, storage_path, file_size, mime_type, site_id,
                        state, extracted_text, summary_json, mitigation_json, error,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.document_id,
                        record.file_name,
                        record.storage_path,
                        record.file_size,
                        record.mime_type,
                        record.site_id,
                        record.state.value,
                        record.extracted_text,
                        record.summary_json,
                        record.mitigation_json,
                        record.error,
                        record.created_at.isoformat(),
                        updated_at.isoformat(),
                    ),
                )

                await db.commit()
                logger.info(f"Added document {record.document_id} to SQLite store")

            except Exception:
                await db.rollback()
                raise

    async def get(self, document_id: str) -> DocumentRecord | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM documents WHERE id = ?", (document_id,))
            row = await cursor.fetchone()

            if not row:
                return None

            return self._row_to_record(row)

    async def list_all(self) -> list[DocumentRecord]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM documents ORDER BY created_at DESC")
            rows = await cursor.fetchall()

            return [self._row_to_record(row) for row in rows]

    async def update(self, document_id: str, **kwargs) -> None:
        """
        Update fields on an existing document record.

        Args:
            document_id: Document identifier
            **kwargs: Fields to update

        Raises:
            ValueError: If document_id doesn't exist or invalid field name
        """
        invalid = set(kwargs.keys()) - UPDATABLE_FIELDS
        if invalid:
            raise ValueError(f"Invalid field names: {invalid}")

        if not kwargs:
            return

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute(
                    "SELECT id FROM documents WHERE id = ?", (document_id,)
                )
                if not await cursor.fetchone():
                    raise ValueError(f"Document {document_id} not found")

                set_parts = []
                values = []

                for key, value in kwargs.items():
                    if key == "state" and isinstance(value, DocumentState):
                        value = value.value
                    elif key == "updated_at" and isinstance(value, datetime):
                        value = value.isoformat()

                    set_parts.append(f"{key} = ?")
                    values.append(value)

                if "updated_at" not in kwargs:
                    set_parts.append("updated_at = ?")
                    values.append(_now_iso())

                values.append(document_id)

                sql = f"UPDATE documents SET {', '.join(set_parts)} WHERE id = ?"
                await db.execute(sql, values)

                await db.commit()
                logger.info(f"Updated document {document_id}: {list(kwargs.keys())}")

            except Exception:
                await db.rollback()
                raise

    async def add_share(self, share: ShareRecord) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute(
                    "SELECT id FROM documents WHERE id = ?", (share.document_id,)
                )
                if not await cursor.fetchone():
                    raise ValueError(f"Document {share.document_id} not found")

                cursor = await db.execute(
                    "SELECT token FROM shares WHERE token = ?", (share.token,)
                )
                if await cursor.fetchone():
                    raise ValueError("Share token already exists")

                await db.execute(
                    """
                    INSERT INTO shares (token, document_id, recipient_email, expires_at, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        share.token,
                        share.document_id,
                        share.recipient_email,
                        share.expires_at.isoformat(),
                        share.created_at.isoformat(),
                    ),
                )

                await db.commit()
                logger.info(f"Added share link for document {share.document_id}")

            except Exception:
                await db.rollback()
                raise

    async def get_share(self, token: str) -> ShareRecord | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT s.*, (SELECT COUNT(*) FROM share_views v WHERE v.token = s.token)
                    AS view_count
                FROM shares s WHERE s.token = ?
                """,
                (token,),
            )
            row = await cursor.fetchone()

            if not row:
                return None

            return ShareRecord(
                token=row["token"],
                document_id=row["document_id"],
                recipient_email=row["recipient_email"],
                expires_at=_parse_dt(row["expires_at"]),
                created_at=_parse_dt(row["created_at"]),
                view_count=row["view_count"],
            )

    async def record_share_view(self, token: str, viewed_at: datetime | None = None) -> int:
        viewed_at = viewed_at or datetime.now(timezone.utc)

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("SELECT token FROM shares WHERE token = ?", (token,))
                if not await cursor.fetchone():
                    raise ValueError("Share link not found")

                await db.execute(
                    "INSERT INTO share_views (token, viewed_at) VALUES (?, ?)",
                    (token, viewed_at.isoformat()),
                )
                cursor = await db.execute(
                    "SELECT COUNT(*) FROM share_views WHERE token = ?", (token,)
                )
                (count,) = await cursor.fetchone()

                await db.commit()
                return count

            except Exception:
                await db.rollback()
                raise

    async def close(self) -> None:
        """
        Checkpoint WAL and close database.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except Exception as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def _row_to_record(self, row: aiosqlite.Row) -> DocumentRecord:
        """
        Convert SQLite row to DocumentRecord.

        Args:
            row: SQLite row (with row_factory=aiosqlite.Row)

        Returns:
            DocumentRecord instance
        """
        return DocumentRecord(
            document_id=row["id"],
            file_name=row["file_name"],
            storage_path=row["storage_path"],
            file_size=row["file_size"],
            mime_type=row["mime_type"],
            site_id=row["site_id"],
            state=DocumentState(row["state"]),
            extracted_text=row["extracted_text"],
            summary_json=row["summary_json"],
            mitigation_json=row["mitigation_json"],
            error=row["error"],
            created_at=_parse_dt(row["created_at"]),
            updated_at=_parse_dt(row["updated_at"]) if row["updated_at"] else None,
        )

# plansight/models/store.py
"""
Document store protocol definition.

Defines the abstract interface the tools depend on; SQLiteDocumentStore
implements it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plansight.models.documents import DocumentRecord, ShareRecord


class DocumentStore(ABC):
    """Abstract base class for document and share persistence."""

    @abstractmethod
    async def add(self, record: "DocumentRecord") -> None:
        """
        Add a document record to the store.

        Args:
            record: DocumentRecord to add

        Raises:
            ValueError: If document_id already exists
        """
        pass

    @abstractmethod
    async def get(self, document_id: str) -> "DocumentRecord | None":
        """
        Get a document record by ID.

        Returns:
            DocumentRecord if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_all(self) -> "list[DocumentRecord]":
        """
        List all document records.

        Returns:
            List of all DocumentRecords, ordered by creation time (newest first)
        """
        pass

    @abstractmethod
    async def update(self, document_id: str, **kwargs) -> None:
        """
        Update fields on an existing document record.

        Args:
            document_id: Document identifier
            **kwargs: Fields to update

        Raises:
            ValueError: If document_id doesn't exist
        """
        pass

    @abstractmethod
    async def add_share(self, share: "ShareRecord") -> None:
        """
        Persist a share link.

        Raises:
            ValueError: If the token already exists or the document is unknown
        """
        pass

    @abstractmethod
    async def get_share(self, token: str) -> "ShareRecord | None":
        """
        Get a share link by token, with its current view count.

        Returns:
            ShareRecord if found, None otherwise
        """
        pass

    @abstractmethod
    async def record_share_view(self, token: str, viewed_at: datetime | None = None) -> int:
        """
        Record one view of a share link.

        Returns:
            View count after recording

        Raises:
            ValueError: If the token doesn't exist
        """
        pass

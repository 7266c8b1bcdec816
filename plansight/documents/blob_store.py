# plansight/documents/blob_store.py
"""
Blob storage for uploaded document bytes.

BlobStore is the interface the tools depend on; LocalBlobStore keeps objects
as files under a root directory.
"""

import logging
import re
import time
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

UNASSIGNED_PREFIX = "unassigned"

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def make_storage_key(file_name: str, site_id: str | None = None, now_ms: int | None = None) -> str:
    """
    Build an object key of the form {site_id or "unassigned"}/{epoch_ms}-{file_name}.

    Args:
        file_name: Original file name (path components are dropped)
        site_id:   Owning site, if any
        now_ms:    Timestamp override in milliseconds

    Returns:
        Object key
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    base = Path(file_name).name
    safe_name = _UNSAFE_NAME_CHARS.sub("_", base).strip("._") or "document"
    prefix = _UNSAFE_NAME_CHARS.sub("_", site_id).strip("._") if site_id else ""
    return f"{prefix or UNASSIGNED_PREFIX}/{now_ms}-{safe_name}"


class BlobStore(ABC):
    """Abstract object store keyed by relative path strings."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> str:
        """Store data under key and return the key."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return stored bytes. Raises KeyError if the key is unknown."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether an object is stored under key."""


class LocalBlobStore(BlobStore):
    """Filesystem-backed blob store."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key or Path(key).is_absolute():
            raise ValueError(f"Invalid blob key: {key!r}")
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Blob key escapes store root: {key!r}")
        return path

    def put(self, key: str, data: bytes) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Stored blob {key} ({len(data)} bytes)")
        return key

    def get(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise KeyError(key)
        return path.read_bytes()

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

"""
Local durable storage.
JSON snapshots per key and raw blobs for queued image bytes.
"""

import os
import json
import hashlib
import tempfile
from typing import Any, Dict, Optional

from faceprop.core.config import settings
from faceprop.core.logging import get_logger
from faceprop.core.exceptions import PersistenceError

logger = get_logger(__name__)


def _safe_name(name: str) -> str:
    """File-system safe name derived from a key or blob id."""
    return hashlib.md5(name.encode()).hexdigest()


class FileStore:
    """
    Directory-backed store.

    Layout:
        <root>/kv/<md5(key)>.json
        <root>/blobs/<md5(blob_id)>.bin

    Writes go to a temp file that replaces the target, so a crash never
    leaves a half-written snapshot behind.
    """

    def __init__(self, root_dir: str = None):
        self.root_dir = root_dir or settings.storage_dir
        self.kv_dir = os.path.join(self.root_dir, "kv")
        self.blob_dir = os.path.join(self.root_dir, "blobs")
        try:
            os.makedirs(self.kv_dir, exist_ok=True)
            os.makedirs(self.blob_dir, exist_ok=True)
        except OSError as e:
            raise PersistenceError(str(e), operation="init")
        logger.info(f"FileStore initialized at {self.root_dir}")

    def _key_path(self, key: str) -> str:
        return os.path.join(self.kv_dir, _safe_name(key) + ".json")

    def _blob_path(self, blob_id: str) -> str:
        return os.path.join(self.blob_dir, _safe_name(blob_id) + ".bin")

    def _atomic_write(self, path: str, data: bytes) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # === Key/value ===

    def get(self, key: str) -> Optional[Any]:
        path = self._key_path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read snapshot '{key}': {e}")
            raise PersistenceError(f"cannot read '{key}': {e}", operation="get")

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False).encode("utf-8")
            self._atomic_write(self._key_path(key), payload)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to write snapshot '{key}': {e}")
            raise PersistenceError(f"cannot write '{key}': {e}", operation="set")
        logger.debug(f"Snapshot '{key}' written ({len(payload)} bytes)")

    # === Blobs ===

    def write_blob(self, blob_id: str, data: bytes) -> None:
        try:
            self._atomic_write(self._blob_path(blob_id), data)
        except OSError as e:
            logger.error(f"Failed to write blob {blob_id}: {e}")
            raise PersistenceError(f"cannot write blob {blob_id}: {e}", operation="write_blob")

    def read_blob(self, blob_id: str) -> Optional[bytes]:
        path = self._blob_path(blob_id)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"cannot read blob {blob_id}: {e}", operation="read_blob")

    def delete_blob(self, blob_id: str) -> None:
        path = self._blob_path(blob_id)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            raise PersistenceError(f"cannot delete blob {blob_id}: {e}", operation="delete_blob")


class MemoryStore:
    """In-process store for tests and sessions without a disk."""

    def __init__(self):
        self._values: Dict[str, str] = {}
        self._blobs: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._values.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        # Stored serialized so callers cannot mutate the snapshot afterwards
        try:
            self._values[key] = json.dumps(value)
        except TypeError as e:
            raise PersistenceError(f"cannot serialize '{key}': {e}", operation="set")

    def write_blob(self, blob_id: str, data: bytes) -> None:
        self._blobs[blob_id] = bytes(data)

    def read_blob(self, blob_id: str) -> Optional[bytes]:
        return self._blobs.get(blob_id)

    def delete_blob(self, blob_id: str) -> None:
        self._blobs.pop(blob_id, None)


# Global instance
_file_store: Optional[FileStore] = None

def get_file_store() -> FileStore:
    """Get singleton FileStore instance."""
    global _file_store
    if _file_store is None:
        _file_store = FileStore()
    return _file_store

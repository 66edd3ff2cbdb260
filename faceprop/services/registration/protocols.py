"""
Collaborator interfaces of the registration queue.
The queue never touches the network, disk or wall clock directly.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Protocol, runtime_checkable

from faceprop.models.domain.registration import SampleRecord


@runtime_checkable
class UploadTransport(Protocol):
    """Sends one sample to the remote registration endpoint."""

    async def upload(self, record: SampleRecord, file_bytes: bytes) -> None:
        """Return on 2xx; raise UploadError otherwise."""
        ...


@runtime_checkable
class LocalStore(Protocol):
    """Key/value snapshots plus a blob area for image bytes. Failures raise PersistenceError."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def write_blob(self, blob_id: str, data: bytes) -> None: ...

    def read_blob(self, blob_id: str) -> Optional[bytes]: ...

    def delete_blob(self, blob_id: str) -> None: ...


class ClockSource(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

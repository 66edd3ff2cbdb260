"""
Registration queue.

Keeps the class registry (class -> samples) and the pending queue of samples
the remote store has not confirmed. Upload failures never propagate: the
sample is queued, its bytes kept in the local blob area and the pending
snapshot rewritten.
"""

import asyncio
import bisect
import itertools
from typing import Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from faceprop.core.exceptions import PersistenceError, UnknownClassError, UploadError
from faceprop.core.logging import get_logger, log_error
from faceprop.models.domain.registration import (
    CaptureMethod,
    ClassSummary,
    FailureCategory,
    RegistrationResult,
    RegistrationStatus,
    RetrySummary,
    SampleRecord,
)
from faceprop.services.registration.protocols import (
    ClockSource,
    LocalStore,
    SystemClock,
    UploadTransport,
)

logger = get_logger(__name__)

QUEUE_KEY = "queued-registrations"

# (sequence number, record); lists stay sorted by sequence
Entry = Tuple[int, SampleRecord]


def _insert(entries: List[Entry], seq: int, record: SampleRecord) -> None:
    position = bisect.bisect([s for s, _ in entries], seq)
    entries.insert(position, (seq, record))


class RegistrationQueue:
    """
    Class registry with an offline-tolerant upload queue.

    Usage:
        queue = RegistrationQueue(transport, store)
        queue.load()
        queue.add_class("alice")
        result = await queue.register_sample("alice", data, "a.jpg", "camera")
    """

    def __init__(
        self,
        transport: UploadTransport,
        store: LocalStore,
        clock: ClockSource = None,
        queue_key: str = QUEUE_KEY,
    ):
        self._transport = transport
        self._store = store
        self._clock = clock or SystemClock()
        self._queue_key = queue_key

        self._classes: Dict[str, List[Entry]] = {}
        self._pending: List[Entry] = []
        self._active: Optional[str] = None
        self._seq = itertools.count()
        self._retry_lock = asyncio.Lock()

    # ============================================================
    # Classes
    # ============================================================

    def add_class(self, name: str) -> bool:
        """Create an empty class and make it active. False for blank or duplicate names."""
        name = (name or "").strip()
        if not name or name in self._classes:
            logger.debug(f"Rejected class name: '{name}'")
            return False
        self._classes[name] = []
        self._active = name
        logger.info(f"Class added: {name}")
        return True

    @property
    def active_class(self) -> Optional[str]:
        return self._active

    def list_classes(self) -> List[Tuple[str, int]]:
        """(name, sample count) pairs in insertion order."""
        return [(name, len(entries)) for name, entries in self._classes.items()]

    def class_summaries(self) -> List[ClassSummary]:
        return [
            ClassSummary(
                name=name,
                count=len(entries),
                pending=sum(1 for _, r in entries if not r.synced),
            )
            for name, entries in self._classes.items()
        ]

    def get_samples(self, class_name: str) -> List[SampleRecord]:
        if class_name not in self._classes:
            raise UnknownClassError(class_name)
        return [r for _, r in self._classes[class_name]]

    @property
    def pending(self) -> List[SampleRecord]:
        """Unsynced records, oldest first."""
        return [r for _, r in self._pending]

    def get_stats(self) -> Dict[str, int]:
        total = sum(len(entries) for entries in self._classes.values())
        return {
            "classes": len(self._classes),
            "samples": total,
            "synced": total - len(self._pending),
            "pending": len(self._pending),
        }

    # ============================================================
    # Registration
    # ============================================================

    async def register_sample(
        self,
        class_name: str,
        file_bytes: bytes,
        file_name: str,
        method: Union[CaptureMethod, str],
        cancel: Optional[asyncio.Event] = None,
    ) -> RegistrationResult:
        """
        Upload one sample; queue it locally if the upload fails or is cancelled.

        Raises:
            UnknownClassError: class_name was never added
        """
        if class_name not in self._classes:
            raise UnknownClassError(class_name)

        # Taken before the first await so list order follows call order
        seq = next(self._seq)
        record = SampleRecord(
            class_name=class_name,
            method=CaptureMethod(method),
            file_name=file_name,
            created_at=self._clock.now(),
        )

        try:
            await self._attempt_upload(record, file_bytes, cancel)
        except UploadError as e:
            logger.warning(f"Upload of {file_name} for '{class_name}' failed ({e.category}): {e.message}")
            _insert(self._classes[class_name], seq, record)
            _insert(self._pending, seq, record)
            persisted = self._persist_queued(record, file_bytes)
            return RegistrationResult(
                record=record,
                status=RegistrationStatus.QUEUED,
                category=FailureCategory(e.category),
                message=f"Sample queued for '{class_name}': {e.message}",
                persisted=persisted,
            )

        synced = record.model_copy(update={"synced": True})
        _insert(self._classes[class_name], seq, synced)
        logger.info(f"Sample {file_name} synced to '{class_name}'")
        return RegistrationResult(
            record=synced,
            status=RegistrationStatus.SYNCED,
            message=f"Sample saved to '{class_name}'",
        )

    async def _attempt_upload(
        self,
        record: SampleRecord,
        file_bytes: bytes,
        cancel: Optional[asyncio.Event] = None,
    ) -> None:
        """Single upload attempt. Any failure surfaces as UploadError."""
        if cancel is not None and cancel.is_set():
            raise UploadError("Upload cancelled", category="cancelled")

        upload = asyncio.ensure_future(self._transport.upload(record, file_bytes))
        waiter = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
        try:
            if waiter is None:
                await upload
                return
            done, _ = await asyncio.wait({upload, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if upload in done:
                upload.result()
                return
            raise UploadError("Upload cancelled", category="cancelled")
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(f"{type(e).__name__}: {e}", category="transient") from e
        finally:
            if waiter is not None:
                waiter.cancel()
            if not upload.done():
                upload.cancel()

    # ============================================================
    # Persistence
    # ============================================================

    def _save_snapshot(self) -> None:
        self._store.set(self._queue_key, [r.to_snapshot() for r in self.pending])

    def _persist_queued(self, record: SampleRecord, file_bytes: bytes) -> bool:
        """Write the sample bytes and the pending snapshot. False if either write failed."""
        persisted = True
        try:
            self._store.write_blob(record.id, file_bytes)
        except PersistenceError as e:
            log_error(logger, e, {"record": record.id, "class": record.class_name})
            persisted = False

        # Snapshot is written even without the blob; retry counts it as missing_payload
        try:
            self._save_snapshot()
        except PersistenceError as e:
            log_error(logger, e, {"key": self._queue_key, "record": record.id})
            persisted = False
        return persisted

    def load(self) -> int:
        """
        Restore the persisted pending snapshot.

        Each record is re-created in the registry (its class is added if
        missing) and in the pending queue. Returns the number restored.
        """
        try:
            raw = self._store.get(self._queue_key)
        except PersistenceError as e:
            log_error(logger, e, {"key": self._queue_key})
            return 0
        if not raw:
            return 0
        if not isinstance(raw, list):
            logger.error(
                f"Corrupted queue snapshot under '{self._queue_key}': "
                f"expected a list, got {type(raw).__name__}"
            )
            return 0

        known = {r.id for entries in self._classes.values() for _, r in entries}
        restored = 0
        for item in raw:
            try:
                record = SampleRecord.from_snapshot(item)
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed queued record: {e.error_count()} errors")
                continue
            if record.id in known or record.synced:
                continue
            seq = next(self._seq)
            _insert(self._classes.setdefault(record.class_name, []), seq, record)
            _insert(self._pending, seq, record)
            known.add(record.id)
            restored += 1

        logger.info(f"Restored {restored} queued registrations")
        return restored

    # ============================================================
    # Retry
    # ============================================================

    def _mark_synced(self, record: SampleRecord) -> None:
        self._pending = [(s, r) for s, r in self._pending if r.id != record.id]
        synced = record.model_copy(update={"synced": True})
        entries = self._classes[record.class_name]
        for i, (s, r) in enumerate(entries):
            if r.id == record.id:
                entries[i] = (s, synced)
                break

    async def retry_pending(self) -> RetrySummary:
        """
        Re-upload every queued record whose bytes are still stored.
        Records without stored bytes stay queued and are counted as missing.
        """
        async with self._retry_lock:
            summary = RetrySummary()
            for record in self.pending:
                try:
                    payload = self._store.read_blob(record.id)
                except PersistenceError as e:
                    log_error(logger, e, {"record": record.id})
                    payload = None
                if payload is None:
                    summary.missing_payload += 1
                    continue

                summary.attempted += 1
                try:
                    await self._attempt_upload(record, payload)
                except UploadError as e:
                    logger.warning(f"Retry of {record.file_name} failed ({e.category}): {e.message}")
                    continue

                self._mark_synced(record)
                summary.synced += 1
                try:
                    self._store.delete_blob(record.id)
                except PersistenceError as e:
                    log_error(logger, e, {"record": record.id})

            if summary.synced:
                try:
                    self._save_snapshot()
                except PersistenceError as e:
                    log_error(logger, e, {"key": self._queue_key})
                    summary.persisted = False
                    summary.error = e.message

            summary.still_pending = len(self._pending)
            logger.info(
                f"Retry pass: {summary.synced}/{summary.attempted} synced, "
                f"{summary.still_pending} still pending"
            )
            return summary

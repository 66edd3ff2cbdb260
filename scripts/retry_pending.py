#!/usr/bin/env python3
"""
Pending Registration Retry Script

Loads the locally persisted registration queue and re-uploads every
queued sample whose image bytes are still stored.

Usage:
    python scripts/retry_pending.py            # retry and report
    python scripts/retry_pending.py --dry-run  # only list queued samples
"""

import sys
import asyncio

from faceprop.core.config import settings
from faceprop.core.logging import setup_logging
from faceprop.infrastructure import FileStore, HttpUploadTransport
from faceprop.services.registration import RegistrationQueue


class Colors:
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def print_header(text: str):
    print(f"\n{Colors.BOLD}{'='*60}\n{text}\n{'='*60}{Colors.ENDC}")


async def retry(dry_run: bool) -> int:
    store = FileStore(settings.storage_dir)
    queue = RegistrationQueue(
        transport=HttpUploadTransport(),
        store=store,
        queue_key=settings.queue_key,
    )
    restored = queue.load()

    print_header(f"Queued registrations in {settings.storage_dir}: {restored}")
    for record in queue.pending:
        has_bytes = store.read_blob(record.id) is not None
        marker = "" if has_bytes else f" {Colors.WARNING}(image missing){Colors.ENDC}"
        print(f"  {record.created_at:%Y-%m-%d %H:%M}  {record.class_name:<20} {record.file_name}{marker}")

    if dry_run or not restored:
        if dry_run:
            print("\nRun without --dry-run to upload")
        return 0

    summary = await queue.retry_pending()

    print_header("Retry result")
    print(f"{Colors.OKGREEN}✓ Synced: {summary.synced}/{summary.attempted}{Colors.ENDC}")
    if summary.missing_payload:
        print(f"{Colors.WARNING}⚠ Missing image bytes: {summary.missing_payload}{Colors.ENDC}")
    if summary.still_pending:
        print(f"{Colors.WARNING}⚠ Still pending: {summary.still_pending}{Colors.ENDC}")
    if not summary.persisted:
        print(f"{Colors.FAIL}✗ Snapshot not saved: {summary.error}{Colors.ENDC}")
        return 1
    return 0


if __name__ == "__main__":
    setup_logging(level=settings.log_level)
    dry_run = "--dry-run" in sys.argv or "-n" in sys.argv
    sys.exit(asyncio.run(retry(dry_run)))

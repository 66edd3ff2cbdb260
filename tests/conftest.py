"""
Shared fixtures: a synthetic 68-point face whose proportions all fall
inside the default reference ranges, and registration doubles.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from faceprop.core.exceptions import PersistenceError, UploadError
from faceprop.infrastructure.storage import MemoryStore
from faceprop.models.domain.landmarks import LandmarkSet

# Face width 200px (jaw[0] to jaw[16]), eye line y=120, nose tip y=180,
# mouth center y=240, chin y=300: each vertical third is 60px.
JAW = [
    (0, 100), (3, 130), (7, 160), (12, 190), (20, 220), (35, 250), (55, 275), (77, 292),
    (100, 300),
    (123, 292), (145, 275), (165, 250), (180, 220), (188, 190), (193, 160), (197, 130), (200, 100),
]
LEFT_EYEBROW = [(25, 70), (40, 55), (60, 50), (80, 52), (95, 60)]
RIGHT_EYEBROW = [(105, 60), (120, 52), (140, 50), (160, 55), (175, 70)]
NOSE = [(100, 125), (100, 140), (100, 155), (100, 180), (70, 185), (140, 180), (100, 188), (115, 186), (130, 185)]
LEFT_EYE = [(40, 120), (50, 114), (70, 114), (80, 120), (70, 126), (50, 126)]
RIGHT_EYE = [(120, 120), (130, 114), (150, 114), (160, 120), (150, 126), (130, 126)]
MOUTH = [
    (60, 240), (72, 234), (86, 230), (100, 232), (114, 230), (128, 234),
    (140, 240), (128, 246), (114, 250), (100, 248), (86, 250), (72, 246),
    (66, 240), (86, 236), (100, 237), (114, 236), (134, 240), (114, 243), (100, 244), (86, 243),
]

FACE_POINTS = JAW + LEFT_EYEBROW + RIGHT_EYEBROW + NOSE + LEFT_EYE + RIGHT_EYE + MOUTH


def build_points(overrides=None):
    """Flat 68-point list with some indexes replaced."""
    points = list(FACE_POINTS)
    for index, point in (overrides or {}).items():
        points[index] = point
    return points


@pytest.fixture
def face_points():
    return build_points()


@pytest.fixture
def face_landmarks():
    return LandmarkSet.from_points(build_points())


@pytest.fixture
def make_landmarks():
    def _make(overrides=None):
        return LandmarkSet.from_points(build_points(overrides))
    return _make


# ============================================================
# Registration doubles
# ============================================================

class FakeTransport:
    """
    Upload double. Files named in `fail` raise UploadError with the given
    category; files named in `gates` wait for their event before finishing.
    """

    def __init__(self, fail=None, gates=None):
        self.fail = dict(fail or {})
        self.gates = gates or {}
        self.calls = []

    async def upload(self, record, file_bytes):
        self.calls.append((record.class_name, record.file_name, file_bytes))
        gate = self.gates.get(record.file_name)
        if gate is not None:
            await gate.wait()
        category = self.fail.get(record.file_name)
        if category:
            raise UploadError(f"simulated {category} failure", category=category)


class HangingTransport:
    """Upload that never completes on its own."""

    def __init__(self):
        self.cancelled = False

    async def upload(self, record, file_bytes):
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


class BrokenStore(MemoryStore):
    """MemoryStore whose writes fail."""

    def set(self, key, value):
        raise PersistenceError("disk full", operation="set")

    def write_blob(self, blob_id, data):
        raise PersistenceError("disk full", operation="write_blob")


class BlobFailingStore(MemoryStore):
    """MemoryStore whose blob writes fail while snapshot writes succeed."""

    def write_blob(self, blob_id, data):
        raise PersistenceError("blob area read-only", operation="write_blob")


class FixedClock:
    def __init__(self, when=None):
        self.when = when or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def now(self):
        return self.when


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FixedClock()

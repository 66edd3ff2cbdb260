"""
Registration domain models.
Samples captured for a class and the outcome of their upload.
"""

import uuid
from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CaptureMethod(str, Enum):
    """How the sample image was obtained."""
    CAMERA = "camera"
    UPLOAD = "upload"


class RegistrationStatus(str, Enum):
    """Final state of one registerSample call."""
    SYNCED = "synced"
    QUEUED = "queued"


class FailureCategory(str, Enum):
    """Status message category shown to the user."""
    NONE = "none"
    VALIDATION = "validation"
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    CANCELLED = "cancelled"


class SampleRecord(BaseModel):
    """
    One registered sample.

    Serialized with camelCase keys (className, fileName, createdAt) so the
    persisted snapshot keeps the shape the front end stores locally.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Record ID")
    class_name: str = Field(..., description="Class the sample belongs to")
    method: CaptureMethod = Field(..., description="camera or upload")
    file_name: str = Field(..., description="Original file name")
    created_at: datetime = Field(..., description="Registration timestamp")
    synced: bool = Field(False, description="Confirmed by the remote store")

    def to_snapshot(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_snapshot(cls, data: dict) -> "SampleRecord":
        return cls.model_validate(data)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RegistrationResult(BaseModel):
    """Outcome of a single registration attempt."""

    record: SampleRecord
    status: RegistrationStatus
    category: FailureCategory = FailureCategory.NONE
    message: str = ""
    persisted: bool = Field(True, description="Pending snapshot written to local store")

    @property
    def synced(self) -> bool:
        return self.status == RegistrationStatus.SYNCED


class ClassSummary(BaseModel):
    """Class name with its current sample counts."""

    name: str
    count: int = Field(0, ge=0)
    pending: int = Field(0, ge=0, description="Unsynced samples")


class RetrySummary(BaseModel):
    """Outcome of one retry pass over the pending queue."""

    attempted: int = 0
    synced: int = 0
    still_pending: int = 0
    missing_payload: int = 0
    persisted: bool = True
    error: Optional[str] = None

"""
Registration API Router
Classes, sample registration and the offline queue
"""

from fastapi import APIRouter, File, Form, UploadFile

from faceprop.core.responses import ApiResponse
from faceprop.core.exceptions import InvalidClassNameError, ValidationError
from faceprop.core.logging import get_logger
from faceprop.models.domain.registration import CaptureMethod
from faceprop.models.requests import AddClassRequest
from faceprop.services.registration import RegistrationQueue

logger = get_logger(__name__)
router = APIRouter()

registration_queue_instance: RegistrationQueue = None


def set_services(registration_queue: RegistrationQueue):
    global registration_queue_instance
    registration_queue_instance = registration_queue


@router.get("/classes")
async def list_classes():
    """Classes in insertion order with sample counts."""
    summaries = registration_queue_instance.class_summaries()
    return ApiResponse.ok(
        [s.model_dump() for s in summaries],
        meta={"active": registration_queue_instance.active_class},
    )


@router.post("/classes")
async def add_class(data: AddClassRequest):
    """Create a class and make it active."""
    if not registration_queue_instance.add_class(data.name):
        raise InvalidClassNameError(data.name)
    return ApiResponse.ok({"name": data.name.strip(), "active": True})


@router.get("/classes/{class_name}/samples")
async def get_samples(class_name: str):
    samples = registration_queue_instance.get_samples(class_name)
    return ApiResponse.ok([s.to_snapshot() for s in samples])


@router.post("/samples")
async def register_sample(
    className: str = Form(...),
    method: str = Form(CaptureMethod.UPLOAD.value),
    file: UploadFile = File(...),
):
    """
    Register one sample image.
    Upload failures are not errors here: the sample is queued and the
    result reports status "queued" with a failure category.
    """
    try:
        capture = CaptureMethod(method)
    except ValueError:
        raise ValidationError(f"Unknown capture method '{method}'", field="method")

    content = await file.read()
    if not content:
        raise ValidationError("Empty file", field="file")

    result = await registration_queue_instance.register_sample(
        className, content, file.filename or "sample.jpg", capture
    )
    return ApiResponse.ok(
        {
            "record": result.record.to_snapshot(),
            "status": result.status.value,
            "category": result.category.value,
            "message": result.message,
            "persisted": result.persisted,
        }
    )


@router.get("/pending")
async def get_pending():
    """Queued samples awaiting upload, oldest first."""
    pending = registration_queue_instance.pending
    return ApiResponse.ok(
        [r.to_snapshot() for r in pending],
        meta=registration_queue_instance.get_stats(),
    )


@router.post("/retry")
async def retry_pending():
    """Re-upload queued samples whose bytes are still stored."""
    summary = await registration_queue_instance.retry_pending()
    return ApiResponse.ok(summary.model_dump())

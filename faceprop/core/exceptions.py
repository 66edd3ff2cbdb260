"""
Custom exception hierarchy for the application.
All exceptions inherit from AppException for unified handling.
"""

from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status code for API responses
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# === Not Found Errors ===

class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, entity: str, identifier: str = None):
        message = f"{entity} not found"
        if identifier:
            message = f"{entity} '{identifier}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404
        )


class UnknownClassError(NotFoundError):
    def __init__(self, class_name: str):
        super().__init__("Class", class_name)


# === Validation Errors ===

class ValidationError(AppException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code=code,
            status_code=422,
            details=details
        )


class InvalidClassNameError(ValidationError):
    def __init__(self, name: str):
        super().__init__(
            message=f"Class name '{name}' is empty or already registered",
            field="name",
            code="INVALID_CLASS_NAME"
        )


class LandmarkContractError(ValidationError):
    """Landmark group is smaller than the upstream model guarantees."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Landmark set violates the 68-point contract: {reason}",
            field="landmarks",
            code="LANDMARK_CONTRACT"
        )


class DegenerateGeometryError(ValidationError):
    """A reference segment has zero length, so ratios are undefined."""

    def __init__(self, reason: str, metric: str = None):
        super().__init__(
            message=f"Degenerate face geometry: {reason}",
            field=metric,
            code="DEGENERATE_GEOMETRY"
        )


# === Registration Errors ===

class UploadError(AppException):
    """
    Remote registration upload failed.

    category is one of "transient", "permanent" or "cancelled".
    """

    def __init__(self, message: str, category: str = "transient", http_status: int = None):
        details = {"category": category}
        if http_status is not None:
            details["http_status"] = http_status
        self.category = category
        self.http_status = http_status
        super().__init__(
            message=message,
            code="UPLOAD_FAILED",
            status_code=502,
            details=details
        )


class PersistenceError(AppException):
    """Local durable store read/write failed."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=f"Persistence error: {message}",
            code="PERSISTENCE_ERROR",
            status_code=500,
            details=details
        )

"""
Core package - foundation for the application.

Modules:
- config.py - Application settings via Pydantic Settings
- exceptions.py - Custom exception hierarchy
- responses.py - Unified API response format
- logging.py - Centralized logging configuration
"""

from faceprop.core.config import settings, VERSION
from faceprop.core.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    DegenerateGeometryError,
    UploadError,
    PersistenceError,
)
from faceprop.core.responses import ApiResponse

__all__ = [
    'settings',
    'VERSION',
    'AppException',
    'NotFoundError',
    'ValidationError',
    'DegenerateGeometryError',
    'UploadError',
    'PersistenceError',
    'ApiResponse',
]

"""
Registration package - class registry with an offline upload queue.
"""

from faceprop.services.registration.protocols import (
    UploadTransport,
    LocalStore,
    ClockSource,
    SystemClock,
)
from faceprop.services.registration.queue import RegistrationQueue, QUEUE_KEY

__all__ = [
    'UploadTransport',
    'LocalStore',
    'ClockSource',
    'SystemClock',
    'RegistrationQueue',
    'QUEUE_KEY',
]

"""
Infrastructure package - external dependencies and integrations.

Modules:
- http_transport.py - Remote registration endpoint client
- storage.py - Local durable store
"""

from faceprop.infrastructure.http_transport import HttpUploadTransport
from faceprop.infrastructure.storage import FileStore, MemoryStore, get_file_store

__all__ = [
    'HttpUploadTransport',
    'FileStore',
    'MemoryStore',
    'get_file_store',
]

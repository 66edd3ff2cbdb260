"""
HTTP upload transport for the remote registration endpoint.
"""

import mimetypes
from typing import Optional

import httpx

from faceprop.core.config import settings
from faceprop.core.logging import get_logger
from faceprop.core.exceptions import UploadError
from faceprop.models.domain.registration import SampleRecord

logger = get_logger(__name__)

# Statuses worth retrying later; any other non-2xx is permanent
TRANSIENT_STATUSES = {408, 429}


def classify_status(status_code: int) -> str:
    if status_code >= 500 or status_code in TRANSIENT_STATUSES:
        return "transient"
    return "permanent"


class HttpUploadTransport:
    """
    Posts samples as multipart/form-data:
    userId, className, method, fileName and the file part.

    Pass `client` to reuse a configured httpx.AsyncClient; otherwise a
    short-lived client is opened per upload.
    """

    def __init__(
        self,
        endpoint: str = None,
        user_id: str = None,
        timeout: float = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = endpoint or settings.registration_endpoint
        self.user_id = user_id or settings.registration_user_id
        self.timeout = timeout or settings.upload_timeout
        self._client = client

    async def _post(self, client: httpx.AsyncClient, data: dict, files: dict) -> httpx.Response:
        return await client.post(self.endpoint, data=data, files=files, timeout=self.timeout)

    async def upload(self, record: SampleRecord, file_bytes: bytes) -> None:
        content_type = mimetypes.guess_type(record.file_name)[0] or "application/octet-stream"
        data = {
            "userId": self.user_id,
            "className": record.class_name,
            "method": record.method.value,
            "fileName": record.file_name,
        }
        files = {"file": (record.file_name, file_bytes, content_type)}

        try:
            if self._client is not None:
                response = await self._post(self._client, data, files)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, data, files)
        except httpx.TimeoutException as e:
            raise UploadError(f"Upload timed out after {self.timeout}s: {e}", category="transient")
        except httpx.HTTPError as e:
            raise UploadError(f"Upload transport error: {e}", category="transient")

        if not response.is_success:
            category = classify_status(response.status_code)
            logger.debug(f"Upload rejected: HTTP {response.status_code} ({category})")
            raise UploadError(
                f"Endpoint returned HTTP {response.status_code}",
                category=category,
                http_status=response.status_code,
            )
        logger.debug(f"Uploaded {record.file_name} for '{record.class_name}'")

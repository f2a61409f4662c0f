"""
Employee photo upload.

``CloudinaryImageHost`` talks to Cloudinary's signed upload endpoint.
``PhotoUploadAdapter`` is what the services call: it skips the host when no
photo was supplied and turns every host failure into an INTERNAL_ERROR.
"""
import hashlib
import logging
import time
from typing import Optional, Protocol, Tuple

import httpx

from config import Settings
from errors import ServiceError, internal_error

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class ImageHostError(Exception):
    """The image host rejected the upload or could not be reached."""


class ImageHost(Protocol):
    async def upload(self, payload: str, target_path: str) -> str:
        ...


class CloudinaryImageHost:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.cloud_name = settings.CLOUDINARY_CLOUD_NAME
        self.api_key = settings.CLOUDINARY_API_KEY
        self.api_secret = settings.CLOUDINARY_API_SECRET
        self.timeout = settings.UPLOAD_TIMEOUT_SECONDS
        self._client = client

    def sign(self, params: dict) -> str:
        """Cloudinary signature: sorted ``key=value`` pairs joined by ``&`` plus the secret, SHA-1."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    async def upload(self, payload: str, target_path: str) -> str:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageHostError("Cloudinary credentials are not configured.")

        params = {"folder": target_path, "timestamp": str(int(time.time()))}
        form = {
            **params,
            "file": payload,
            "api_key": self.api_key,
            "signature": self.sign(params),
        }
        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)

        if self._client is not None:
            response = await self._client.post(url, data=form)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, data=form)

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = None
            raise ImageHostError(message or f"Upload rejected with HTTP {response.status_code}")

        secure_url = response.json().get("secure_url")
        if not secure_url:
            raise ImageHostError("Upload response did not include a secure_url")
        return secure_url


class PhotoUploadAdapter:
    def __init__(self, host: ImageHost, folder: str):
        self.host = host
        self.folder = folder

    async def upload(self, photo: Optional[str]) -> Tuple[Optional[str], Optional[ServiceError]]:
        if not photo:
            return None, None
        try:
            url = await self.host.upload(photo, self.folder)
        except Exception as e:
            logger.warning("Employee photo upload failed: %s", e)
            return None, internal_error("Employee photo upload failed.", details=str(e))
        return url, None

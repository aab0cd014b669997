"""Cloudinary Image Store — async wrapper over the blocking Cloudinary SDK.

Invariants:
    - SDK calls run in a worker thread; the event loop is never blocked
    - Uploads are bounded by upload_timeout_seconds
    - All SDK failures mapped to ImageStorageError (core/errors.py)
    - Credentials travel with each call; the SDK's global config is never mutated

Design Decisions:
    - 800x800 "limit" + quality auto transformation applied server-side by Cloudinary
    - delete() treats "not found" as success: the goal state (no image) already holds
"""

import asyncio
import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from closetmap.core.collaborator_protocols import StoredImage
from closetmap.core.errors import ImageStorageError

logger = logging.getLogger(__name__)

UPLOAD_TRANSFORMATION = [
    {"width": 800, "height": 800, "crop": "limit"},
    {"quality": "auto"},
]


class CloudinaryImageStore:
    """ImageStore backed by Cloudinary."""

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        upload_timeout_seconds: float = 20.0,
    ):
        self.configured = all([cloud_name, api_key, api_secret])
        if not self.configured:
            logger.warning("Cloudinary credentials missing; image uploads will fail")
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }
        self.upload_timeout_seconds = upload_timeout_seconds

    async def upload(self, image_base64: str, folder: str) -> StoredImage:
        """Upload a data-URI image into folder; returns its URL and public_id."""
        if not self.configured:
            raise ImageStorageError("Cloudinary is not configured", "upload")
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    cloudinary.uploader.upload,
                    image_base64,
                    folder=folder,
                    transformation=UPLOAD_TRANSFORMATION,
                    resource_type="image",
                    **self._credentials,
                ),
                timeout=self.upload_timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise ImageStorageError(
                f"timed out after {self.upload_timeout_seconds:g}s", "upload",
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload error: {e}")
            raise ImageStorageError("provider rejected the upload", "upload")

        if "secure_url" not in result or "public_id" not in result:
            raise ImageStorageError("provider returned no URL", "upload")
        logger.info(
            f"Image uploaded: {result['public_id']} ({result.get('bytes', 0)} bytes)",
        )
        return StoredImage(url=result["secure_url"], public_id=result["public_id"])

    async def delete(self, public_id: str) -> None:
        """Delete an image by public_id."""
        if not self.configured:
            raise ImageStorageError("Cloudinary is not configured", "delete")
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy, public_id, **self._credentials,
            )
        except CloudinaryError as e:
            raise ImageStorageError(str(e), "delete")
        outcome = result.get("result")
        if outcome not in ("ok", "not found"):
            raise ImageStorageError(f"unexpected result {outcome!r}", "delete")

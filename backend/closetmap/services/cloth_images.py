"""Cloth Image Handling — upload with validation, best-effort deletion.

Invariants:
    - Payloads are validated (core/image_payload.py) before any network call
    - Images live under "<cloudinary_folder>/<owner_id>/clothes"
    - discard_image NEVER raises (except cancellation): an orphaned stored image
      is acceptable, a failed record operation is not
"""

import logging

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import ImageStore, StoredImage
from closetmap.core.image_payload import normalize_image_payload

logger = logging.getLogger(__name__)


def cloth_image_folder(settings: Settings, owner_id: str) -> str:
    return f"{settings.cloudinary_folder}/{owner_id}/clothes"


async def upload_cloth_image(
    image_store: ImageStore, settings: Settings, owner_id: str, image_base64: str,
) -> StoredImage:
    payload = normalize_image_payload(image_base64, settings.max_image_bytes)
    return await image_store.upload(payload, cloth_image_folder(settings, owner_id))


async def discard_image(
    image_store: ImageStore, public_id: str, owner_id: str, cloth_id: str | None = None,
) -> bool:
    """Attempt to delete a stored image; log and return False on failure."""
    try:
        await image_store.delete(public_id)
        return True
    except Exception:
        logger.warning(
            f"Could not delete image {public_id}; leaving it orphaned",
            extra={"owner_id": owner_id, "cloth_id": cloth_id},
            exc_info=True,
        )
        return False

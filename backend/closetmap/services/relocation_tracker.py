"""Relocation Tracker — partial cloth updates, including moves between bags.

Invariants:
    - All checks (cloth ownership, target bag ownership, field validity, image
      payload) complete before the first mutating call
    - last_moved_timestamp advances only when container_bag_id actually changes
    - A target bag that is missing or owned by someone else is ResourceNotFoundError
      and the record is left untouched
    - Image replacement: upload new, commit, then best-effort delete of the old image

Design Decisions:
    - Field rules are pure (core/relocation.py); this class only sequences IO
    - clock injectable so timestamp behavior is testable without sleeping
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import ImageStore
from closetmap.core.relocation import plan_cloth_update
from closetmap.db.types import utcnow
from closetmap.schemas.cloth import ClothResponse
from closetmap.services.cloth_images import discard_image, upload_cloth_image
from closetmap.services.ownership import (
    bag_names, get_bag_or_404, get_cloth_or_404,
)
from closetmap.services.presenters import present_cloth

logger = logging.getLogger(__name__)


class RelocationTracker:
    """Applies partial updates to clothes and tracks bag moves."""

    def __init__(
        self,
        db: AsyncSession,
        image_store: ImageStore,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.image_store = image_store
        self.settings = settings
        self.clock = clock

    async def update_cloth(
        self, owner_id: str, cloth_id: str, patch: dict[str, Any],
    ) -> ClothResponse:
        """Apply only the supplied fields of patch to the owner's cloth."""
        cloth = await get_cloth_or_404(self.db, owner_id, cloth_id)
        plan = plan_cloth_update(cloth.container_bag_id, patch, self.clock())

        if plan.bag_changed:
            await get_bag_or_404(self.db, owner_id, plan.target_bag_id)

        old_public_id = None
        new_image_base64 = patch.get("image_base64")
        if new_image_base64 is not None:
            stored = await upload_cloth_image(
                self.image_store, self.settings, owner_id, new_image_base64,
            )
            old_public_id = cloth.image_public_id
            plan.changes["image_url"] = stored.url
            plan.changes["image_public_id"] = stored.public_id

        previous_bag_id = cloth.container_bag_id
        for name, value in plan.changes.items():
            setattr(cloth, name, value)
        try:
            await self.db.commit()
        except Exception:
            if old_public_id:
                await discard_image(
                    self.image_store, plan.changes["image_public_id"], owner_id, cloth_id,
                )
            raise

        if plan.bag_changed:
            logger.info(
                f"Cloth {cloth_id} moved {previous_bag_id} -> {cloth.container_bag_id}",
                extra={"owner_id": owner_id, "cloth_id": cloth_id,
                       "bag_id": cloth.container_bag_id},
            )
        if old_public_id and old_public_id != cloth.image_public_id:
            await discard_image(self.image_store, old_public_id, owner_id, cloth_id)

        names = await bag_names(self.db, owner_id, [cloth.container_bag_id])
        return present_cloth(cloth, names[cloth.container_bag_id])

"""Cloth Service — create, fetch, favorite toggle, delete and filter options.

Invariants:
    - Creation checks the target bag (404) and validates the image payload before
      uploading; the upload happens before the insert
    - If the insert fails after a successful upload, the uploaded image is discarded
    - Deletion removes the record first, then deletes the image best-effort
    - Filter options list distinct NON-EMPTY values, sorted, owner-scoped
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import ImageStore
from closetmap.db.types import utcnow
from closetmap.schemas.bag import BagSummary
from closetmap.schemas.cloth import ClothCreate, ClothResponse, FilterOptions
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.services.cloth_images import discard_image, upload_cloth_image
from closetmap.services.identifier_allocator import IdentifierAllocator
from closetmap.services.ownership import bag_names, get_bag_or_404, get_cloth_or_404
from closetmap.services.presenters import present_cloth

logger = logging.getLogger(__name__)


class ClothService:
    """Cloth lifecycle operations outside of relocation."""

    def __init__(
        self,
        db: AsyncSession,
        image_store: ImageStore,
        settings: Settings,
        allocator: IdentifierAllocator | None = None,
    ):
        self.db = db
        self.image_store = image_store
        self.settings = settings
        self.allocator = allocator or IdentifierAllocator(
            db, max_attempts=settings.barcode_max_attempts,
        )

    async def create_cloth(self, owner_id: str, body: ClothCreate) -> ClothResponse:
        bag = await get_bag_or_404(self.db, owner_id, body.container_bag_id)
        bag_name = bag.name

        stored = await upload_cloth_image(
            self.image_store, self.settings, owner_id, body.image_base64,
        )
        now = utcnow()
        try:
            cloth = await self.allocator.create_cloth(owner_id, {
                "name": body.name,
                "color": body.color,
                "owner": body.owner,
                "category": body.category,
                "notes": body.notes,
                "container_bag_id": body.container_bag_id,
                "image_url": stored.url,
                "image_public_id": stored.public_id,
                "created_at": now,
                "last_moved_timestamp": now,
                "favorite": False,
            })
        except Exception:
            await discard_image(self.image_store, stored.public_id, owner_id)
            raise
        return present_cloth(cloth, bag_name)

    async def get_cloth(self, owner_id: str, cloth_id: str) -> ClothResponse:
        cloth = await get_cloth_or_404(self.db, owner_id, cloth_id)
        names = await bag_names(self.db, owner_id, [cloth.container_bag_id])
        return present_cloth(cloth, names[cloth.container_bag_id])

    async def toggle_favorite(self, owner_id: str, cloth_id: str) -> bool:
        cloth = await get_cloth_or_404(self.db, owner_id, cloth_id)
        cloth.favorite = not cloth.favorite
        await self.db.commit()
        return cloth.favorite

    async def delete_cloth(self, owner_id: str, cloth_id: str) -> None:
        cloth = await get_cloth_or_404(self.db, owner_id, cloth_id)
        public_id = cloth.image_public_id
        await self.db.delete(cloth)
        await self.db.commit()
        logger.info(
            f"Cloth {cloth_id} deleted",
            extra={"owner_id": owner_id, "cloth_id": cloth_id},
        )
        await discard_image(self.image_store, public_id, owner_id, cloth_id)

    async def filter_options(self, owner_id: str) -> FilterOptions:
        return FilterOptions(
            colors=await self._distinct(owner_id, Cloth.color),
            owners=await self._distinct(owner_id, Cloth.owner),
            categories=await self._distinct(owner_id, Cloth.category),
            bags=await self._bag_summaries(owner_id),
        )

    async def _distinct(self, owner_id: str, column) -> list[str]:
        result = await self.db.execute(
            select(column)
            .where(Cloth.owner_id == owner_id, column != "")
            .distinct()
            .order_by(column),
        )
        return list(result.scalars().all())

    async def _bag_summaries(self, owner_id: str) -> list[BagSummary]:
        result = await self.db.execute(
            select(Bag.bag_id, Bag.name)
            .where(Bag.owner_id == owner_id)
            .order_by(Bag.created_at.desc()),
        )
        return [BagSummary(bag_id=bag_id, name=name) for bag_id, name in result.all()]

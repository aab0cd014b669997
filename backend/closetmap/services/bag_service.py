"""Bag Service — list, fetch, create, rename and delete the caller's bags.

Invariants:
    - Listings and single fetches carry cloth_count
    - Creation delegates numbering and barcode generation to IdentifierAllocator
    - Deletion removes the bag and every cloth inside it in one transaction;
      stored images of the removed clothes are then deleted best-effort
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.collaborator_protocols import ImageStore
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.schemas.bag import BagResponse
from closetmap.services.cloth_images import discard_image
from closetmap.services.identifier_allocator import IdentifierAllocator
from closetmap.services.ownership import cloth_counts, get_bag_or_404
from closetmap.services.presenters import present_bag

logger = logging.getLogger(__name__)


class BagService:
    """CRUD over bags, scoped to one owner per call."""

    def __init__(
        self,
        db: AsyncSession,
        image_store: ImageStore,
        allocator: IdentifierAllocator | None = None,
    ):
        self.db = db
        self.image_store = image_store
        self.allocator = allocator or IdentifierAllocator(db)

    async def list_bags(self, owner_id: str) -> list[BagResponse]:
        result = await self.db.execute(
            select(Bag).where(Bag.owner_id == owner_id).order_by(Bag.created_at.desc()),
        )
        bags = result.scalars().all()
        counts = await cloth_counts(self.db, owner_id, (b.bag_id for b in bags))
        return [present_bag(b, counts[b.bag_id]) for b in bags]

    async def get_bag(self, owner_id: str, bag_id: str) -> BagResponse:
        bag = await get_bag_or_404(self.db, owner_id, bag_id)
        counts = await cloth_counts(self.db, owner_id, [bag.bag_id])
        return present_bag(bag, counts[bag.bag_id])

    async def create_bag(self, owner_id: str, name: str) -> BagResponse:
        bag = await self.allocator.create_bag(owner_id, name)
        return present_bag(bag, cloth_count=0)

    async def rename_bag(self, owner_id: str, bag_id: str, name: str) -> BagResponse:
        bag = await get_bag_or_404(self.db, owner_id, bag_id)
        bag.name = name
        await self.db.commit()
        counts = await cloth_counts(self.db, owner_id, [bag.bag_id])
        return present_bag(bag, counts[bag.bag_id])

    async def delete_bag(self, owner_id: str, bag_id: str) -> int:
        """Delete bag and contents; returns how many clothes were removed."""
        bag = await get_bag_or_404(self.db, owner_id, bag_id)

        result = await self.db.execute(
            select(Cloth.cloth_id, Cloth.image_public_id).where(
                Cloth.owner_id == owner_id, Cloth.container_bag_id == bag_id,
            ),
        )
        contents = result.all()

        await self.db.execute(
            delete(Cloth).where(
                Cloth.owner_id == owner_id, Cloth.container_bag_id == bag_id,
            ),
        )
        await self.db.delete(bag)
        await self.db.commit()
        logger.info(
            f"Bag {bag_id} deleted with {len(contents)} clothes",
            extra={"owner_id": owner_id, "bag_id": bag_id},
        )

        for cloth_id, public_id in contents:
            await discard_image(self.image_store, public_id, owner_id, cloth_id)
        return len(contents)

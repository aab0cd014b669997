"""Scan Resolver — barcode value to owning bag and its current contents.

Invariants:
    - Both lookups are scoped to the caller's owner_id; a barcode of another
      owner resolves exactly like an unknown barcode (ResourceNotFoundError)
    - The contents query runs only after the bag lookup succeeds
    - Contents ordered newest first, each decorated with the bag's name
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.errors import ResourceNotFoundError
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.schemas.cloth import ScanResponse
from closetmap.services.presenters import present_bag, present_cloth

logger = logging.getLogger(__name__)


class ScanResolver:
    """Resolves scanned bag barcodes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, owner_id: str, barcode_value: str) -> ScanResponse:
        result = await self.db.execute(
            select(Bag).where(
                Bag.owner_id == owner_id, Bag.barcode_value == barcode_value,
            ),
        )
        bag = result.scalar_one_or_none()
        if bag is None:
            logger.info(
                "Scan of unknown barcode",
                extra={"owner_id": owner_id, "barcode_value": barcode_value},
            )
            raise ResourceNotFoundError("Bag", barcode_value)

        contents = await self.db.execute(
            select(Cloth)
            .where(Cloth.owner_id == owner_id, Cloth.container_bag_id == bag.bag_id)
            .order_by(Cloth.created_at.desc()),
        )
        clothes = contents.scalars().all()
        return ScanResponse(
            bag=present_bag(bag, cloth_count=len(clothes)),
            clothes=[present_cloth(c, bag.name) for c in clothes],
        )

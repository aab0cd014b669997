"""Export Service — printable barcode labels for the caller's bags.

Invariants:
    - Sheets list bags in natural bag_id order (B2 before B10)
    - An owner with no bags gets ResourceNotFoundError rather than an empty PDF
    - Rendering runs in a worker thread
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.collaborator_protocols import BarcodeLabel, LabelRenderer
from closetmap.core.errors import ResourceNotFoundError
from closetmap.core.identifiers import bag_sort_key
from closetmap.models.bag import Bag
from closetmap.services.ownership import get_bag_or_404

logger = logging.getLogger(__name__)


class ExportService:
    """Builds barcode artifacts through the injected LabelRenderer."""

    def __init__(self, db: AsyncSession, renderer: LabelRenderer):
        self.db = db
        self.renderer = renderer

    async def barcode_sheet(self, owner_id: str) -> bytes:
        result = await self.db.execute(select(Bag).where(Bag.owner_id == owner_id))
        bags = sorted(result.scalars().all(), key=lambda b: bag_sort_key(b.bag_id))
        if not bags:
            raise ResourceNotFoundError("Bags", owner_id)

        labels = [
            BarcodeLabel(caption=f"{b.bag_id}: {b.name}", code=b.barcode_value)
            for b in bags
        ]
        logger.info(
            f"Rendering barcode sheet for {len(labels)} bags",
            extra={"owner_id": owner_id},
        )
        return await asyncio.to_thread(self.renderer.render_sheet, labels)

    async def barcode_image(self, owner_id: str, bag_id: str) -> str:
        bag = await get_bag_or_404(self.db, owner_id, bag_id)
        return await asyncio.to_thread(self.renderer.render_barcode, bag.barcode_value)

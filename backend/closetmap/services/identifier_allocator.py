"""Identifier Allocator — assigns bag numbers, barcodes and cloth ids against the store.

Invariants:
    - Next bag number derives from the owner's MOST RECENTLY CREATED bag
      (core/identifiers.next_bag_number), never from a count or a max()
    - Uniqueness is enforced by the store, not pre-checked: the write is the test
    - Barcode / cloth_id collisions are retried with a fresh code, at most max_attempts times
    - A bag_id collision is NOT retried: it surfaces as ConflictError (HTTP 409)

Design Decisions:
    - Read-then-increment is racy by construction; two concurrent creations for one
      owner can compute the same number and the (owner_id, bag_id) constraint
      decides the loser
    - On IntegrityError the allocator re-reads to learn which constraint fired,
      which works the same on PostgreSQL and SQLite
    - Code factories are injectable so collision paths are testable
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.domain_types import BagId, BarcodeValue, ClothId
from closetmap.core.errors import ConflictError
from closetmap.core.identifiers import (
    format_bag_id, generate_barcode, generate_cloth_id, next_bag_number,
)
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.services.ownership import find_bag

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class IdentifierAllocator:
    """Allocates identifiers and performs the identifier-bearing inserts."""

    def __init__(
        self,
        db: AsyncSession,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        barcode_factory: Callable[[], BarcodeValue] = generate_barcode,
        cloth_id_factory: Callable[[], ClothId] = generate_cloth_id,
    ):
        self.db = db
        self.max_attempts = max(1, max_attempts)
        self._barcode_factory = barcode_factory
        self._cloth_id_factory = cloth_id_factory

    async def allocate_bag_id(self, owner_id: str) -> BagId:
        """Next "B<n>" for owner, from the most recently created bag."""
        result = await self.db.execute(
            select(Bag.bag_id)
            .where(Bag.owner_id == owner_id)
            .order_by(Bag.created_at.desc())
            .limit(1),
        )
        return format_bag_id(next_bag_number(result.scalar_one_or_none()))

    async def create_bag(self, owner_id: str, name: str) -> Bag:
        """Insert a new bag with an allocated bag_id and a unique barcode."""
        bag_id = await self.allocate_bag_id(owner_id)

        for attempt in range(1, self.max_attempts + 1):
            bag = Bag(
                bag_id=bag_id,
                name=name,
                barcode_value=self._barcode_factory(),
                owner_id=owner_id,
            )
            self.db.add(bag)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if await find_bag(self.db, owner_id, bag_id) is not None:
                    logger.warning(
                        f"Bag number collision on {bag_id}",
                        extra={"owner_id": owner_id, "bag_id": bag_id},
                    )
                    raise ConflictError(
                        f"Bag id {bag_id} is already taken; retry the request",
                    )
                logger.warning(
                    "Barcode collision, regenerating",
                    extra={"owner_id": owner_id, "attempt": attempt},
                )
                continue
            logger.info(
                f"Bag {bag_id} created",
                extra={"owner_id": owner_id, "bag_id": bag_id},
            )
            return bag

        raise ConflictError(
            f"Could not allocate a unique barcode after {self.max_attempts} attempts",
        )

    async def create_cloth(self, owner_id: str, fields: dict[str, Any]) -> Cloth:
        """Insert a cloth under a freshly generated, globally unique cloth_id."""
        for attempt in range(1, self.max_attempts + 1):
            cloth_id = self._cloth_id_factory()
            cloth = Cloth(cloth_id=cloth_id, owner_id=owner_id, **fields)
            self.db.add(cloth)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if not await self._cloth_id_taken(cloth_id):
                    raise ConflictError("Cloth conflicts with an existing record")
                logger.warning(
                    "Cloth id collision, regenerating",
                    extra={"owner_id": owner_id, "attempt": attempt},
                )
                continue
            logger.info(
                f"Cloth {cloth_id} created",
                extra={
                    "owner_id": owner_id,
                    "cloth_id": cloth_id,
                    "bag_id": cloth.container_bag_id,
                },
            )
            return cloth

        raise ConflictError(
            f"Could not allocate a unique cloth id after {self.max_attempts} attempts",
        )

    async def _cloth_id_taken(self, cloth_id: str) -> bool:
        result = await self.db.execute(
            select(Cloth.id).where(Cloth.cloth_id == cloth_id),
        )
        return result.first() is not None

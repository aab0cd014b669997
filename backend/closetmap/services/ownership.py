"""Owner-Scoped Lookups — every bag read used by the services goes through here.

Invariants:
    - Every query filters on owner_id; there is no unscoped variant
    - A bag owned by someone else is indistinguishable from a missing bag (404)
    - Batched helpers issue one query regardless of how many ids they resolve
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.domain_types import UNKNOWN_BAG_NAME
from closetmap.core.errors import ResourceNotFoundError
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth


async def find_bag(db: AsyncSession, owner_id: str, bag_id: str) -> Bag | None:
    result = await db.execute(
        select(Bag).where(Bag.owner_id == owner_id, Bag.bag_id == bag_id),
    )
    return result.scalar_one_or_none()


async def get_bag_or_404(db: AsyncSession, owner_id: str, bag_id: str) -> Bag:
    bag = await find_bag(db, owner_id, bag_id)
    if bag is None:
        raise ResourceNotFoundError("Bag", bag_id)
    return bag


async def get_cloth_or_404(db: AsyncSession, owner_id: str, cloth_id: str) -> Cloth:
    result = await db.execute(
        select(Cloth).where(Cloth.owner_id == owner_id, Cloth.cloth_id == cloth_id),
    )
    cloth = result.scalar_one_or_none()
    if cloth is None:
        raise ResourceNotFoundError("Cloth", cloth_id)
    return cloth


async def bag_names(
    db: AsyncSession, owner_id: str, bag_ids: Iterable[str],
) -> dict[str, str]:
    """Map bag_id -> display name; ids without an owned bag map to UNKNOWN_BAG_NAME."""
    wanted = set(bag_ids)
    if not wanted:
        return {}
    result = await db.execute(
        select(Bag.bag_id, Bag.name).where(
            Bag.owner_id == owner_id, Bag.bag_id.in_(wanted),
        ),
    )
    names = {bag_id: name for bag_id, name in result.all()}
    return {bag_id: names.get(bag_id, UNKNOWN_BAG_NAME) for bag_id in wanted}


async def cloth_counts(
    db: AsyncSession, owner_id: str, bag_ids: Iterable[str],
) -> dict[str, int]:
    """Map bag_id -> number of the owner's clothes inside it."""
    wanted = set(bag_ids)
    if not wanted:
        return {}
    result = await db.execute(
        select(Cloth.container_bag_id, func.count(Cloth.id))
        .where(Cloth.owner_id == owner_id, Cloth.container_bag_id.in_(wanted))
        .group_by(Cloth.container_bag_id),
    )
    counts = dict(result.all())
    return {bag_id: counts.get(bag_id, 0) for bag_id in wanted}

"""Filter/Sort Query Builder — composes listing params into one owner-scoped SELECT.

Invariants:
    - Every query is scoped to owner_id, whatever the params say
    - color/owner/category: case-insensitive literal substring (LIKE wildcards escaped)
    - bag_id, favorite: exact match
    - search: substring over name OR color OR owner OR category, AND-ed with the rest
    - Results decorated with bag_name through ONE batched, owner-scoped lookup
"""

from collections.abc import Mapping

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.cloth_filters import ClothFilter, parse_cloth_filter
from closetmap.core.domain_types import ClothSortField, SortOrder
from closetmap.models.cloth import Cloth
from closetmap.schemas.cloth import ClothResponse
from closetmap.services.ownership import bag_names
from closetmap.services.presenters import present_cloth

SORT_COLUMNS = {
    ClothSortField.NAME: Cloth.name,
    ClothSortField.COLOR: Cloth.color,
    ClothSortField.OWNER: Cloth.owner,
    ClothSortField.CATEGORY: Cloth.category,
    ClothSortField.CONTAINER_BAG_ID: Cloth.container_bag_id,
    ClothSortField.FAVORITE: Cloth.favorite,
    ClothSortField.LAST_MOVED: Cloth.last_moved_timestamp,
    ClothSortField.CREATED_AT: Cloth.created_at,
}

SEARCH_COLUMNS = (Cloth.name, Cloth.color, Cloth.owner, Cloth.category)

_SUBSTRING_COLUMNS = {
    "color": Cloth.color,
    "owner": Cloth.owner,
    "category": Cloth.category,
}


def compose_cloth_query(owner_id: str, flt: ClothFilter) -> Select:
    """Build the SELECT for an already-parsed filter."""
    query = select(Cloth).where(Cloth.owner_id == owner_id)

    for name, value in flt.substring_filters.items():
        query = query.where(
            _SUBSTRING_COLUMNS[name].icontains(value, autoescape=True),
        )
    if flt.bag_id is not None:
        query = query.where(Cloth.container_bag_id == flt.bag_id)
    if flt.favorite is not None:
        query = query.where(Cloth.favorite == flt.favorite)
    if flt.search is not None:
        query = query.where(or_(*(
            column.icontains(flt.search, autoescape=True)
            for column in SEARCH_COLUMNS
        )))

    column = SORT_COLUMNS[flt.sort_by]
    primary = column.asc() if flt.sort_order == SortOrder.ASC else column.desc()
    return query.order_by(primary, Cloth.created_at.desc(), Cloth.cloth_id)


def build_cloth_query(owner_id: str, params: Mapping[str, str | None]) -> Select:
    """Parse raw API params and build the owner-scoped SELECT."""
    return compose_cloth_query(owner_id, parse_cloth_filter(params))


class ClothQueryService:
    """Runs filtered cloth listings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_clothes(
        self, owner_id: str, params: Mapping[str, str | None],
    ) -> list[ClothResponse]:
        result = await self.db.execute(build_cloth_query(owner_id, params))
        clothes = result.scalars().all()
        names = await bag_names(
            self.db, owner_id, (c.container_bag_id for c in clothes),
        )
        return [present_cloth(c, names[c.container_bag_id]) for c in clothes]

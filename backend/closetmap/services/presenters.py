"""Response assembly — ORM rows plus derived fields into API schemas."""

from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.schemas.bag import BagResponse
from closetmap.schemas.cloth import ClothResponse


def present_bag(bag: Bag, cloth_count: int | None = None) -> BagResponse:
    return BagResponse(
        bag_id=bag.bag_id,
        name=bag.name,
        barcode_value=bag.barcode_value,
        owner_id=bag.owner_id,
        created_at=bag.created_at,
        cloth_count=cloth_count,
    )


def present_cloth(cloth: Cloth, bag_name: str) -> ClothResponse:
    return ClothResponse(
        cloth_id=cloth.cloth_id,
        name=cloth.name,
        image_url=cloth.image_url,
        image_public_id=cloth.image_public_id,
        color=cloth.color,
        owner=cloth.owner,
        category=cloth.category,
        notes=cloth.notes,
        container_bag_id=cloth.container_bag_id,
        bag_name=bag_name,
        favorite=cloth.favorite,
        owner_id=cloth.owner_id,
        last_moved_timestamp=cloth.last_moved_timestamp,
        created_at=cloth.created_at,
    )

"""Bag Routes — CRUD over the caller's storage bags.

Invariants:
    - Every route resolves the caller through get_owner_id before touching the store
    - Deleting a bag cascades to the clothes it contains
"""

from fastapi import APIRouter, Depends, status

from closetmap.api.dependencies import get_bag_service, get_owner_id
from closetmap.schemas.bag import BagCreate, BagResponse, BagUpdate
from closetmap.schemas.common import MessageResponse
from closetmap.services.bag_service import BagService

router = APIRouter(prefix="/api/v1/bags", tags=["bags"])


@router.get("", response_model=list[BagResponse])
async def list_bags(
    owner_id: str = Depends(get_owner_id),
    service: BagService = Depends(get_bag_service),
):
    """Caller's bags, newest first, with cloth counts."""
    return await service.list_bags(owner_id)


@router.get("/{bag_id}", response_model=BagResponse)
async def get_bag(
    bag_id: str,
    owner_id: str = Depends(get_owner_id),
    service: BagService = Depends(get_bag_service),
):
    return await service.get_bag(owner_id, bag_id)


@router.post("", response_model=BagResponse, status_code=status.HTTP_201_CREATED)
async def create_bag(
    body: BagCreate,
    owner_id: str = Depends(get_owner_id),
    service: BagService = Depends(get_bag_service),
):
    """Create a bag with the next sequential bag id and a fresh barcode."""
    return await service.create_bag(owner_id, body.name)


@router.put("/{bag_id}", response_model=BagResponse)
async def rename_bag(
    bag_id: str,
    body: BagUpdate,
    owner_id: str = Depends(get_owner_id),
    service: BagService = Depends(get_bag_service),
):
    return await service.rename_bag(owner_id, bag_id, body.name)


@router.delete("/{bag_id}", response_model=MessageResponse)
async def delete_bag(
    bag_id: str,
    owner_id: str = Depends(get_owner_id),
    service: BagService = Depends(get_bag_service),
):
    removed = await service.delete_bag(owner_id, bag_id)
    return MessageResponse(
        message=f"Bag {bag_id} deleted along with {removed} item(s)",
    )

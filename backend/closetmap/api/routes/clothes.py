"""Cloth Routes — listing, scanning, CRUD and favorite toggling for clothing items.

Invariants:
    - Literal sub-paths (/scan/..., /filters/options) are registered before /{cloth_id}
    - Listing query parameters are forwarded as-is; parsing and fallbacks live in
      core/cloth_filters.py
    - Updates pass only the fields present in the request body
"""

from fastapi import APIRouter, Depends, Query, status

from closetmap.api.dependencies import (
    get_cloth_query_service,
    get_cloth_service,
    get_owner_id,
    get_relocation_tracker,
    get_scan_resolver,
)
from closetmap.schemas.cloth import (
    ClothCreate,
    ClothResponse,
    ClothUpdate,
    FavoriteResponse,
    FilterOptions,
    ScanResponse,
)
from closetmap.schemas.common import MessageResponse
from closetmap.services.cloth_query import ClothQueryService
from closetmap.services.cloth_service import ClothService
from closetmap.services.relocation_tracker import RelocationTracker
from closetmap.services.scan_resolver import ScanResolver

router = APIRouter(prefix="/api/v1/clothes", tags=["clothes"])


@router.get("", response_model=list[ClothResponse])
async def list_clothes(
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    color: str | None = None,
    owner: str | None = None,
    category: str | None = None,
    bag_id: str | None = Query(None, alias="bagId"),
    favorite: str | None = None,
    search: str | None = None,
    owner_id: str = Depends(get_owner_id),
    service: ClothQueryService = Depends(get_cloth_query_service),
):
    """Filtered, sorted listing of the caller's clothes."""
    params = {
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "color": color,
        "owner": owner,
        "category": category,
        "bagId": bag_id,
        "favorite": favorite,
        "search": search,
    }
    return await service.list_clothes(owner_id, params)


@router.get("/scan/{barcode_value}", response_model=ScanResponse)
async def scan_bag(
    barcode_value: str,
    owner_id: str = Depends(get_owner_id),
    resolver: ScanResolver = Depends(get_scan_resolver),
):
    """Resolve a scanned bag barcode to the bag and its contents."""
    return await resolver.resolve(owner_id, barcode_value)


@router.get("/filters/options", response_model=FilterOptions)
async def filter_options(
    owner_id: str = Depends(get_owner_id),
    service: ClothService = Depends(get_cloth_service),
):
    return await service.filter_options(owner_id)


@router.get("/{cloth_id}", response_model=ClothResponse)
async def get_cloth(
    cloth_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ClothService = Depends(get_cloth_service),
):
    return await service.get_cloth(owner_id, cloth_id)


@router.post("", response_model=ClothResponse, status_code=status.HTTP_201_CREATED)
async def create_cloth(
    body: ClothCreate,
    owner_id: str = Depends(get_owner_id),
    service: ClothService = Depends(get_cloth_service),
):
    return await service.create_cloth(owner_id, body)


@router.put("/{cloth_id}", response_model=ClothResponse)
async def update_cloth(
    cloth_id: str,
    body: ClothUpdate,
    owner_id: str = Depends(get_owner_id),
    tracker: RelocationTracker = Depends(get_relocation_tracker),
):
    """Partial update; moving to another bag refreshes lastMovedTimestamp."""
    return await tracker.update_cloth(
        owner_id, cloth_id, body.model_dump(exclude_unset=True),
    )


@router.patch("/{cloth_id}/favorite", response_model=FavoriteResponse)
async def toggle_favorite(
    cloth_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ClothService = Depends(get_cloth_service),
):
    return FavoriteResponse(favorite=await service.toggle_favorite(owner_id, cloth_id))


@router.delete("/{cloth_id}", response_model=MessageResponse)
async def delete_cloth(
    cloth_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ClothService = Depends(get_cloth_service),
):
    await service.delete_cloth(owner_id, cloth_id)
    return MessageResponse(message=f"Cloth {cloth_id} deleted")

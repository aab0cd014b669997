"""Export Routes — printable barcode artifacts.

Invariants:
    - /barcodes streams a PDF attachment; /barcode/{bag_id} returns inline SVG
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from closetmap.api.dependencies import get_export_service, get_owner_id
from closetmap.services.export_service import ExportService

router = APIRouter(prefix="/api/v1/export", tags=["export"])

SHEET_FILENAME = "bag-barcodes.pdf"


@router.get("/barcodes", response_class=Response)
async def export_barcode_sheet(
    owner_id: str = Depends(get_owner_id),
    service: ExportService = Depends(get_export_service),
):
    """PDF of Code128 labels for all of the caller's bags."""
    pdf = await service.barcode_sheet(owner_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={SHEET_FILENAME}"},
    )


@router.get("/barcode/{bag_id}", response_class=Response)
async def export_bag_barcode(
    bag_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ExportService = Depends(get_export_service),
):
    svg = await service.barcode_image(owner_id, bag_id)
    return Response(content=svg, media_type="image/svg+xml")

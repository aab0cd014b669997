"""Bag Schemas — Pydantic models for the bag endpoints.

Invariants:
    - BagCreate.name / BagUpdate.name: 1-200 chars after stripping
    - bag_id, barcode_value and owner_id are response-only (server-assigned)
"""

from datetime import datetime

from pydantic import Field, field_validator

from closetmap.schemas.common import CamelModel, strip_required


class BagCreate(CamelModel):
    """Bag creation. Only the display name is client-supplied."""
    name: str = Field(max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return strip_required(v, "name")


class BagUpdate(BagCreate):
    """Bag rename."""


class BagResponse(CamelModel):
    """Public bag representation."""
    bag_id: str
    name: str
    barcode_value: str
    owner_id: str
    created_at: datetime
    cloth_count: int | None = None


class BagSummary(CamelModel):
    """Bag reference used by filter options."""
    bag_id: str
    name: str

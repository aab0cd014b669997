"""Cloth Schemas — Pydantic models with field-level validation for cloth endpoints.

Invariants:
    - ClothCreate: name, color, container_bag_id, image_base64 required and non-blank
    - ClothUpdate: every field optional; only supplied fields reach the service
      (model_dump(exclude_unset=True)), so "" and "omitted" stay distinguishable
    - ClothResponse always carries bag_name (decorated by the service layer)
"""

from datetime import datetime

from pydantic import Field, ValidationInfo, field_validator

from closetmap.schemas.bag import BagResponse, BagSummary
from closetmap.schemas.common import CamelModel, strip_required


class ClothCreate(CamelModel):
    """Cloth creation. The image arrives as base64, optionally as a data URI."""
    name: str = Field(max_length=200)
    image_base64: str
    color: str = Field(max_length=100)
    container_bag_id: str = Field(max_length=20)
    owner: str = Field("", max_length=200)
    category: str = Field("", max_length=200)
    notes: str = Field("", max_length=5000)

    @field_validator("name", "color", "container_bag_id", "image_base64")
    @classmethod
    def strip_required_fields(cls, v: str, info: ValidationInfo) -> str:
        return strip_required(v, info.field_name)

    @field_validator("owner", "category", "notes", mode="before")
    @classmethod
    def null_as_blank(cls, v):
        return "" if v is None else v

    @field_validator("owner", "category")
    @classmethod
    def strip_optional(cls, v: str) -> str:
        return v.strip()


class ClothUpdate(CamelModel):
    """Partial cloth update. Emptiness rules live in core/relocation.py."""
    name: str | None = Field(None, max_length=200)
    color: str | None = Field(None, max_length=100)
    owner: str | None = Field(None, max_length=200)
    category: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=5000)
    container_bag_id: str | None = Field(None, max_length=20)
    favorite: bool | None = None
    image_base64: str | None = None


class ClothResponse(CamelModel):
    """Public cloth representation."""
    cloth_id: str
    name: str
    image_url: str
    image_public_id: str
    color: str
    owner: str
    category: str
    notes: str
    container_bag_id: str
    bag_name: str
    favorite: bool
    owner_id: str
    last_moved_timestamp: datetime
    created_at: datetime


class ScanResponse(CamelModel):
    """Result of resolving a scanned bag barcode."""
    bag: BagResponse
    clothes: list[ClothResponse]


class FavoriteResponse(CamelModel):
    favorite: bool


class FilterOptions(CamelModel):
    """Distinct attribute values available for filtering."""
    colors: list[str]
    owners: list[str]
    categories: list[str]
    bags: list[BagSummary]

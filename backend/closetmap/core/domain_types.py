"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - OwnerId is the partition key of every record; never compared across owners
    - BagId is "B<n>", BarcodeValue is "BAG-XXXXXXXX", ClothId is "C-XXXXXXXX"
    - Identity is frozen: once verified it cannot be re-pointed at another owner

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

OwnerId = NewType("OwnerId", str)
BagId = NewType("BagId", str)
BarcodeValue = NewType("BarcodeValue", str)
ClothId = NewType("ClothId", str)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity. Produced only by a CallerVerifier."""
    owner_id: OwnerId


# ─── Identifier Prefixes ─────────────────────────────────────────

BAG_BARCODE_PREFIX = "BAG"
CLOTH_ID_PREFIX = "C"
UNKNOWN_BAG_NAME = "Unknown Bag"


# ─── Enums ───────────────────────────────────────────────────────

class SortOrder(str, Enum):
    """Sort direction for cloth listings."""
    ASC = "asc"
    DESC = "desc"


class ClothSortField(str, Enum):
    """Whitelisted cloth sort keys (API name -> value)."""
    NAME = "name"
    COLOR = "color"
    OWNER = "owner"
    CATEGORY = "category"
    CONTAINER_BAG_ID = "containerBagId"
    FAVORITE = "favorite"
    LAST_MOVED = "lastMovedTimestamp"
    CREATED_AT = "createdAt"


class AuthMode(str, Enum):
    """Caller verification strategies."""
    HEADER = "header"
    JWT = "jwt"

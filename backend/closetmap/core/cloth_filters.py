"""Cloth Filters — parses raw listing params into a normalized, validated filter.

Invariants:
    - parse_cloth_filter is PURE and never raises: unknown or malformed params are dropped
    - Blank strings count as absent
    - favorite accepts only "true"/"false" (case-insensitive); anything else is ignored
    - sort_by is always a whitelisted ClothSortField, defaulting to createdAt desc

Design Decisions:
    - Parsing is separated from SQL composition (services/cloth_query.py) so the
      leniency rules are testable without a database
"""

from dataclasses import dataclass
from typing import Mapping

from closetmap.core.domain_types import ClothSortField, SortOrder


@dataclass(frozen=True)
class ClothFilter:
    """Normalized listing parameters."""
    color: str | None = None
    owner: str | None = None
    category: str | None = None
    bag_id: str | None = None
    favorite: bool | None = None
    search: str | None = None
    sort_by: ClothSortField = ClothSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @property
    def substring_filters(self) -> dict[str, str]:
        """Active case-insensitive substring filters keyed by field."""
        return {
            name: value
            for name, value in (
                ("color", self.color),
                ("owner", self.owner),
                ("category", self.category),
            )
            if value is not None
        }


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_bool(value: str | None) -> bool | None:
    value = _clean(value)
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _parse_sort_field(value: str | None) -> ClothSortField:
    try:
        return ClothSortField(_clean(value))
    except ValueError:
        return ClothSortField.CREATED_AT


def _parse_sort_order(value: str | None) -> SortOrder:
    value = _clean(value)
    try:
        return SortOrder(value.lower()) if value else SortOrder.DESC
    except ValueError:
        return SortOrder.DESC


def parse_cloth_filter(params: Mapping[str, str | None]) -> ClothFilter:
    """Build a ClothFilter from API query params (camelCase keys)."""
    return ClothFilter(
        color=_clean(params.get("color")),
        owner=_clean(params.get("owner")),
        category=_clean(params.get("category")),
        bag_id=_clean(params.get("bagId")),
        favorite=_parse_bool(params.get("favorite")),
        search=_clean(params.get("search")),
        sort_by=_parse_sort_field(params.get("sortBy")),
        sort_order=_parse_sort_order(params.get("sortOrder")),
    )

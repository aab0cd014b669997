"""Relocation Rules — pure planning of partial cloth updates.

Invariants:
    - plan_cloth_update is PURE: returns the field changes, never mutates the record
    - last_moved_timestamp is stamped only when container_bag_id actually changes
    - An omitted field is never touched; "" is a valid explicit value for optional text fields
    - Required text fields (name, color, container_bag_id) cannot be cleared
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from closetmap.core.errors import InputValidationError

REQUIRED_TEXT_FIELDS = ("name", "color", "container_bag_id")
OPTIONAL_TEXT_FIELDS = ("owner", "category", "notes")
UPDATABLE_FIELDS = REQUIRED_TEXT_FIELDS + OPTIONAL_TEXT_FIELDS + ("favorite",)


@dataclass
class UpdatePlan:
    """Field assignments to apply to a cloth record."""
    changes: dict[str, Any] = field(default_factory=dict)
    bag_changed: bool = False

    @property
    def target_bag_id(self) -> str | None:
        if self.bag_changed:
            return self.changes["container_bag_id"]
        return None


def bag_changed(current_bag_id: str, requested_bag_id: str | None) -> bool:
    """True only if a bag was requested and it differs from the current one."""
    return requested_bag_id is not None and requested_bag_id != current_bag_id


def plan_cloth_update(
    current_bag_id: str, patch: dict[str, Any], now: datetime,
) -> UpdatePlan:
    """Translate a partial patch into field assignments.

    patch holds only the fields the caller supplied. None means "not supplied"
    for every field; unknown keys are ignored.
    """
    plan = UpdatePlan()
    for name in UPDATABLE_FIELDS:
        if name not in patch or patch[name] is None:
            continue
        value = patch[name]
        if name in REQUIRED_TEXT_FIELDS:
            value = value.strip()
            if not value:
                raise InputValidationError(f"{name} cannot be empty", name)
        elif name in OPTIONAL_TEXT_FIELDS and name != "notes":
            value = value.strip()
        plan.changes[name] = value

    plan.bag_changed = bag_changed(
        current_bag_id, plan.changes.get("container_bag_id"),
    )
    if plan.bag_changed:
        plan.changes["last_moved_timestamp"] = now
    else:
        # Same bag: nothing to write for the container
        plan.changes.pop("container_bag_id", None)
    return plan

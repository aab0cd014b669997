"""Bag ORM — a physical storage container owned by one user.

Invariants:
    - (owner_id, bag_id) is unique: "B<n>" numbering is per owner
    - (owner_id, barcode_value) is unique: a scan resolves to at most one bag per owner
    - bag_id, barcode_value and owner_id never change after creation

Design Decisions:
    - Surrogate UUID primary key; bag_id is the human-facing key and is only
      unique within an owner's partition
    - Uniqueness enforced by the store, not pre-checked: allocation races are
      caught here and surfaced as ConflictError by the allocator
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from closetmap.db.base import Base
from closetmap.db.types import UTCDateTime, utcnow


class Bag(Base):
    """Storage container, addressed by bag_id and by barcode_value."""
    __tablename__ = "bags"
    __table_args__ = (
        UniqueConstraint("owner_id", "bag_id", name="uq_bags_owner_bag_id"),
        UniqueConstraint(
            "owner_id", "barcode_value", name="uq_bags_owner_barcode",
        ),
        Index("ix_bags_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    bag_id: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    barcode_value: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow,
    )

"""Cloth ORM — a clothing item contained in exactly one bag.

Invariants:
    - cloth_id is globally unique ("C-XXXXXXXX")
    - (owner_id, container_bag_id) references bags(owner_id, bag_id); no orphans
    - last_moved_timestamp set at creation, changed only by an actual relocation
    - owner, category, notes default to "" (never NULL)

Design Decisions:
    - Composite FK with ON DELETE CASCADE: the database removes contents of a
      deleted bag even if a caller bypasses the service layer
    - Image stored as (image_url, image_public_id): the public_id is the handle
      the image store needs for deletion
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Boolean, ForeignKeyConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from closetmap.db.base import Base
from closetmap.db.types import UTCDateTime, utcnow


class Cloth(Base):
    """Clothing item entity."""
    __tablename__ = "clothes"
    __table_args__ = (
        ForeignKeyConstraint(
            ["owner_id", "container_bag_id"],
            ["bags.owner_id", "bags.bag_id"],
            name="fk_clothes_owner_bag",
            ondelete="CASCADE",
        ),
        Index("ix_clothes_owner_bag", "owner_id", "container_bag_id"),
        Index("ix_clothes_owner_favorite", "owner_id", "favorite"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    cloth_id: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    owner: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    category: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_public_id: Mapped[str] = mapped_column(String(500), nullable=False)
    container_bag_id: Mapped[str] = mapped_column(String(20), nullable=False)
    favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    last_moved_timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow,
    )

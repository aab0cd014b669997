"""Initial schema — bags and clothes.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bags",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("bag_id", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("barcode_value", sa.String(20), nullable=False),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", "bag_id", name="uq_bags_owner_bag_id"),
        sa.UniqueConstraint("owner_id", "barcode_value", name="uq_bags_owner_barcode"),
    )
    op.create_index("ix_bags_owner_created", "bags", ["owner_id", "created_at"])

    op.create_table(
        "clothes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("cloth_id", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("color", sa.String(100), nullable=False),
        sa.Column("owner", sa.String(200), nullable=False, server_default=""),
        sa.Column("category", sa.String(200), nullable=False, server_default=""),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("image_public_id", sa.String(500), nullable=False),
        sa.Column("container_bag_id", sa.String(20), nullable=False),
        sa.Column("favorite", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("last_moved_timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["owner_id", "container_bag_id"],
            ["bags.owner_id", "bags.bag_id"],
            name="fk_clothes_owner_bag",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_clothes_owner_bag", "clothes", ["owner_id", "container_bag_id"])
    op.create_index("ix_clothes_owner_favorite", "clothes", ["owner_id", "favorite"])


def downgrade() -> None:
    op.drop_index("ix_clothes_owner_favorite", table_name="clothes")
    op.drop_index("ix_clothes_owner_bag", table_name="clothes")
    op.drop_table("clothes")
    op.drop_index("ix_bags_owner_created", table_name="bags")
    op.drop_table("bags")

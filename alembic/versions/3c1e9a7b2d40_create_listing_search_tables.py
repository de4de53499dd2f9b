"""Create listing search tables

Revision ID: 3c1e9a7b2d40
Revises:
Create Date: 2026-10-18 09:12:41.553210

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9a7b2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "car_details",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("make", sa.String(50), nullable=False),
        sa.Column("model", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("body_type", sa.String(30), nullable=True),
        sa.Column("fuel_type", sa.String(20), nullable=True),
        sa.Column("transmission", sa.String(20), nullable=True),
        sa.Column("condition", sa.String(20), nullable=True),
        sa.Column("color", sa.String(30), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
    )
    # Sort columns for year/mileage ordering
    op.create_index("ix_car_details_year", "car_details", ["year"])
    op.create_index("ix_car_details_mileage", "car_details", ["mileage"])

    op.create_table(
        "car_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "car_detail_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("car_details.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "listing_details",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("seller_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "car_detail_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("car_details.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_listing_details_status", "listing_details", ["status"])
    op.create_index("ix_listing_details_created_at", "listing_details", ["created_at"])
    op.create_index("ix_listing_details_price", "listing_details", ["price"])

    op.create_table(
        "car_metadata",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("value", sa.String(50), nullable=False),
        sa.Column("display_value", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("type", "value", name="uq_car_metadata_type_value"),
    )
    op.create_index("ix_car_metadata_type", "car_metadata", ["type"])

    op.create_table(
        "car_makes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "car_models",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "make_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("car_makes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("car_models")
    op.drop_table("car_makes")
    op.drop_index("ix_car_metadata_type", table_name="car_metadata")
    op.drop_table("car_metadata")
    op.drop_index("ix_listing_details_price", table_name="listing_details")
    op.drop_index("ix_listing_details_created_at", table_name="listing_details")
    op.drop_index("ix_listing_details_status", table_name="listing_details")
    op.drop_table("listing_details")
    op.drop_table("car_images")
    op.drop_index("ix_car_details_mileage", table_name="car_details")
    op.drop_index("ix_car_details_year", table_name="car_details")
    op.drop_table("car_details")

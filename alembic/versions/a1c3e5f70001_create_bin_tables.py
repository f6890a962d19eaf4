"""create bin_locations and variant_bins

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-19 09:12:40.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f70001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "bin_locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop_id", sa.Text(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("shop_id", "code", name="uq_bin_locations_shop_code"),
    )

    op.create_table(
        "variant_bins",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop_id", sa.Text(), nullable=False),
        sa.Column("variant_gid", sa.Text(), nullable=False),
        sa.Column("bin_location_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["bin_location_id"], ["bin_locations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("shop_id", "variant_gid", name="uq_variant_bins_shop_variant"),
    )
    op.create_index("ix_variant_bins_bin_location_id", "variant_bins", ["bin_location_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_variant_bins_bin_location_id", table_name="variant_bins")
    op.drop_table("variant_bins")
    op.drop_table("bin_locations")

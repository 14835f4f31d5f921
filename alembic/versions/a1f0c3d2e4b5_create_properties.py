"""create_properties

Revision ID: a1f0c3d2e4b5
Revises:
Create Date: 2026-10-19

Single table of property listings. `image` holds the /uploads path of the
stored picture.
"""
from alembic import op
import sqlalchemy as sa

revision = "a1f0c3d2e4b5"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("properties")

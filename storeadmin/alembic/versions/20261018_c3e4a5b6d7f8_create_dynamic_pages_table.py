"""create dynamic pages table

Revision ID: c3e4a5b6d7f8
Revises: b2d3f4a5c6e7
Create Date: 2026-10-18 09:20:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c3e4a5b6d7f8"
down_revision = "b2d3f4a5c6e7"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "dynamic_pages",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("subtitle", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("button_text", sa.String(length=100), nullable=True),
        sa.Column("desktop_image", sa.String(length=1024), nullable=True),
        sa.Column("mobile_image", sa.String(length=1024), nullable=True),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("video_source", sa.String(length=1024), nullable=True),
        sa.Column("designer_image", sa.String(length=1024), nullable=True),
        sa.Column("banner_image", sa.String(length=1024), nullable=True),
        sa.Column("interior_image", sa.String(length=1024), nullable=True),
        sa.Column("paragraph1", sa.Text(), nullable=True),
        sa.Column("paragraph2", sa.Text(), nullable=True),
        sa.Column("designer_quote", sa.Text(), nullable=True),
        sa.Column("paragraph_texts", sa.JSON(), nullable=True),
        sa.Column("meta_data", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_dynamic_pages_section"), "dynamic_pages", ["section"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_dynamic_pages_section"), table_name="dynamic_pages")
    op.drop_table("dynamic_pages")

"""create discounts table

Revision ID: b2d3f4a5c6e7
Revises: a1c2e3f4b5d6
Create Date: 2026-10-18 09:10:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b2d3f4a5c6e7"
down_revision = "a1c2e3f4b5d6"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "discounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "type",
            sa.String(length=50),
            nullable=False,
            server_default="Amount off products",
        ),
        sa.Column("method", sa.String(length=20), nullable=False, server_default="Code"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Draft"),
        sa.Column("value", sa.Float(), nullable=True),
        sa.Column("value_unit", sa.String(length=10), nullable=True),
        sa.Column("combinations", sa.JSON(), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("limit_total_uses", sa.Integer(), nullable=True),
        sa.Column("limit_per_user", sa.Boolean(), nullable=True),
        sa.Column("used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("requirements", sa.JSON(), nullable=True),
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
    op.create_index(op.f("ix_discounts_code"), "discounts", ["code"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_discounts_code"), table_name="discounts")
    op.drop_table("discounts")

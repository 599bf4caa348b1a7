"""create shopping lists table

Revision ID: 0003_shopping_lists
Revises: 0002_catalog
Create Date: 2024-10-02 18:59:47.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0003_shopping_lists"
down_revision = "0002_catalog"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "shopping_lists",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("OwnerUserName", sa.String(length=120), nullable=False),
        sa.Column("Name", sa.String(length=200), nullable=False),
        sa.Column("Items", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("Version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "CreatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "UpdatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index(
        "ix_shopping_lists_owner_user_name",
        "shopping_lists",
        ["OwnerUserName"],
    )


def downgrade() -> None:
    op.drop_index("ix_shopping_lists_owner_user_name", table_name="shopping_lists")
    op.drop_table("shopping_lists")

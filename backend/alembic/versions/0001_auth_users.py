"""create auth users table

Revision ID: 0001_auth_users
Revises:
Create Date: 2024-10-01 07:33:32.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_auth_users"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("Username", sa.String(length=120), nullable=False),
        sa.Column("PasswordHash", sa.String(length=255), nullable=False),
        sa.Column("Email", sa.String(length=254), nullable=True),
        sa.Column("Role", sa.String(length=20), nullable=False, server_default=sa.text("'User'")),
        sa.Column(
            "CreatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_users_username", "users", ["Username"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")

"""create accounts and bookmarks tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_create_accounts_and_bookmarks"
down_revision = "0001_create_locations_and_weather"
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_accounts_user_name"), "accounts", ["user_name"], unique=True)

    op.create_table(
        "bookmarks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("location_ids", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("bookmarks")
    op.drop_index(op.f("ix_accounts_user_name"), table_name="accounts")
    op.drop_table("accounts")

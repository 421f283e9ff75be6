"""create locations and weather tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_locations_and_weather"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("city_name", sa.String(length=255), nullable=False),
        sa.Column("query_count", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_locations_city_name"), "locations", ["city_name"], unique=True)

    op.create_table(
        "weather",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("labels", sa.JSON(), nullable=False),
        sa.Column("temp_high", sa.Float(), nullable=True),
        sa.Column("temp_low", sa.Float(), nullable=True),
        sa.Column("at_time", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_weather_location_id"), "weather", ["location_id"], unique=False)
    op.create_index(op.f("ix_weather_at_time"), "weather", ["at_time"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_weather_at_time"), table_name="weather")
    op.drop_index(op.f("ix_weather_location_id"), table_name="weather")
    op.drop_table("weather")
    op.drop_index(op.f("ix_locations_city_name"), table_name="locations")
    op.drop_table("locations")

"""Baseline: cars, users, wishlists, test drives and dealership settings.

Revision ID: 0001
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

car_status = sa.Enum("AVAILABLE", "UNAVAILABLE", "SOLD", name="carstatus")
user_role = sa.Enum("USER", "ADMIN", name="userrole")
booking_status = sa.Enum(
    "PENDING", "CONFIRMED", "COMPLETED", "CANCELLED", "NO_SHOW", name="bookingstatus"
)
day_of_week = sa.Enum(
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY",
    name="dayofweek",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("external_id", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(200)),
        sa.Column("image_url", sa.Text()),
        sa.Column("phone", sa.String(50)),
        sa.Column("role", user_role, nullable=False),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "cars",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("brand", sa.String(100), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("mileage", sa.String(50)),
        sa.Column("color", sa.String(50)),
        sa.Column("fuel_type", sa.String(50), nullable=False),
        sa.Column("transmission", sa.String(50), nullable=False),
        sa.Column("body_type", sa.String(50), nullable=False),
        sa.Column("seats", sa.Integer()),
        sa.Column("description", sa.Text()),
        sa.Column("status", car_status, nullable=False),
        sa.Column("featured", sa.Boolean()),
        sa.Column("images", sa.JSON()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.CheckConstraint("price >= 0", name="ck_cars_price_non_negative"),
    )
    with op.batch_alter_table("cars") as batch_op:
        batch_op.create_index("ix_cars_status_created", ["status", "created_at"])
        batch_op.create_index("ix_cars_status_price", ["status", "price"])

    op.create_table(
        "user_saved_cars",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("car_id", sa.String(36), sa.ForeignKey("cars.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("saved_at", sa.DateTime()),
        sa.UniqueConstraint("user_id", "car_id", name="uq_user_saved_car"),
    )

    op.create_table(
        "test_drive_bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("car_id", sa.String(36), sa.ForeignKey("cars.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("status", booking_status, nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    with op.batch_alter_table("test_drive_bookings") as batch_op:
        batch_op.create_index("ix_test_drive_car_user", ["car_id", "user_id"])

    op.create_table(
        "dealership_info",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200)),
        sa.Column("address", sa.String(300)),
        sa.Column("phone", sa.String(50)),
        sa.Column("email", sa.String(255)),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "working_hours",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("dealership_id", sa.String(36),
                  sa.ForeignKey("dealership_info.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("day_of_week", day_of_week, nullable=False),
        sa.Column("open_time", sa.String(5), nullable=False),
        sa.Column("close_time", sa.String(5), nullable=False),
        sa.Column("is_open", sa.Boolean()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.UniqueConstraint("dealership_id", "day_of_week", name="uq_working_hour_day"),
    )


def downgrade() -> None:
    op.drop_table("working_hours")
    op.drop_table("dealership_info")
    op.drop_table("test_drive_bookings")
    op.drop_table("user_saved_cars")
    op.drop_table("cars")
    op.drop_table("users")
    for enum_type in (day_of_week, booking_status, user_role, car_status):
        enum_type.drop(op.get_bind(), checkfirst=True)

"""initial hotel, room, user and service request schema

Revision ID: 4f1a9c2e7b31
Revises: 
Create Date: 2026-10-19 09:12:44.201377

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '4f1a9c2e7b31'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "hotels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("address", sa.String(1000), nullable=False),
        sa.Column("total_rooms", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("plan", sa.Enum("TRIAL", "BASIC", "PREMIUM", name="hotelplan"), nullable=False),
        sa.Column("settings", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_hotels_email", "hotels", ["email"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("hotel_id", sa.Uuid(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("ADMIN", "STAFF", name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_hotel_id", "users", ["hotel_id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("hotel_id", sa.Uuid(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("number", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("access_token", sa.String(64), nullable=False),
        sa.Column("qr_code", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("hotel_id", "number", name="uq_rooms_hotel_number"),
    )
    op.create_index("ix_rooms_hotel_id", "rooms", ["hotel_id"])
    op.create_index("ix_rooms_access_token", "rooms", ["access_token"], unique=True)

    op.create_table(
        "service_requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("hotel_id", sa.Uuid(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("room_id", sa.Uuid(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("room_number", sa.String(32), nullable=False),
        sa.Column("guest_phone", sa.String(32), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "CALL_SERVICE", "ORDER_FOOD", "ROOM_SERVICE", "COMPLAINT", "CUSTOM_MESSAGE",
                name="requesttype",
            ),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("order_details", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "IN_PROGRESS", "COMPLETED", "CANCELED", name="requeststatus"),
            nullable=False,
        ),
        sa.Column(
            "priority",
            sa.Enum("LOW", "MEDIUM", "HIGH", name="requestpriority"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_service_requests_hotel_id", "service_requests", ["hotel_id"])
    op.create_index("ix_service_requests_room_id", "service_requests", ["room_id"])
    op.create_index("ix_service_requests_status", "service_requests", ["status"])


def downgrade() -> None:
    op.drop_table("service_requests")
    op.drop_table("rooms")
    op.drop_table("users")
    op.drop_table("hotels")
    for enum_name in ("requestpriority", "requeststatus", "requesttype", "userrole", "hotelplan"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)

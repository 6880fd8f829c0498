"""Room model — a guest room reachable through its QR code."""

import uuid
from datetime import datetime

from sqlalchemy import Text, UniqueConstraint
from sqlmodel import Column, Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Room(TimestampMixin, SQLModel, table=True):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("hotel_id", "number", name="uq_rooms_hotel_number"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", nullable=False, index=True)
    number: str = Field(max_length=32, nullable=False)
    name: str = Field(default="", max_length=255)

    # Opaque token used in the guest URL instead of the row id.
    access_token: str = Field(max_length=64, unique=True, nullable=False, index=True)
    # PNG data URL of the guest portal link.
    qr_code: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))

    is_active: bool = Field(default=True)


# ── Pydantic schemas ─────────────────────────────────────────

class RoomCreate(SQLModel):
    number: str = Field(min_length=1, max_length=32)
    name: str = Field(default="", max_length=255)


class RoomUpdate(SQLModel):
    number: str | None = Field(default=None, min_length=1, max_length=32)
    name: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class RoomRead(SQLModel):
    id: uuid.UUID
    hotel_id: uuid.UUID
    number: str
    name: str
    access_token: str
    qr_code: str
    guest_url: str = ""
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RoomPublic(SQLModel):
    """What the guest portal is allowed to see."""
    id: uuid.UUID
    number: str
    name: str

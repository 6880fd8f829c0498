"""Hotel model — the tenant and top-level isolation boundary."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import TimestampMixin, dump_json, load_json, new_uuid


class HotelPlan(StrEnum):
    TRIAL = "trial"
    BASIC = "basic"
    PREMIUM = "premium"


# ── Settings document ────────────────────────────────────────

class ServicesEnabled(BaseModel):
    call_service: bool = True
    order_food: bool = True
    room_service: bool = True
    complaint: bool = True
    custom_message: bool = True


class NotificationSettings(BaseModel):
    sound: bool = True
    email: bool = True


class HotelSettings(BaseModel):
    services_enabled: ServicesEnabled = ServicesEnabled()
    notifications: NotificationSettings = NotificationSettings()


class Hotel(TimestampMixin, SQLModel, table=True):
    __tablename__ = "hotels"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    phone: str = Field(max_length=32, nullable=False)
    address: str = Field(default="", max_length=1000)
    total_rooms: int = Field(default=0, ge=0)
    is_active: bool = Field(default=True)

    plan: HotelPlan = Field(default=HotelPlan.TRIAL)

    # HotelSettings stored as JSON text.
    settings: str = Field(
        default_factory=lambda: HotelSettings().model_dump_json(),
        sa_column=Column(Text, nullable=False),
    )

    def get_settings(self) -> HotelSettings:
        return HotelSettings.model_validate(load_json(self.settings, {}))

    def merge_settings(self, partial: dict) -> HotelSettings:
        """Merge a partial settings document into the stored one."""
        current = self.get_settings().model_dump()
        for section, values in partial.items():
            if isinstance(values, dict) and isinstance(current.get(section), dict):
                current[section].update(values)
            else:
                current[section] = values
        merged = HotelSettings.model_validate(current)
        self.settings = dump_json(merged.model_dump())
        return merged


# ── Pydantic schemas ─────────────────────────────────────────

class HotelUpdate(SQLModel):
    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    address: str | None = Field(default=None, max_length=1000)
    total_rooms: int | None = Field(default=None, ge=0)
    settings: dict | None = Field(default=None, description="Partial settings document")


class HotelRead(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    address: str
    total_rooms: int
    plan: HotelPlan
    is_active: bool
    settings: HotelSettings
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_hotel(cls, hotel: Hotel) -> "HotelRead":
        return cls(
            id=hotel.id,
            name=hotel.name,
            email=hotel.email,
            phone=hotel.phone,
            address=hotel.address,
            total_rooms=hotel.total_rooms,
            plan=hotel.plan,
            is_active=hotel.is_active,
            settings=hotel.get_settings(),
            created_at=hotel.created_at,
            updated_at=hotel.updated_at,
        )


class HotelPublic(SQLModel):
    """What the guest portal is allowed to see."""
    id: uuid.UUID
    name: str
    settings: HotelSettings

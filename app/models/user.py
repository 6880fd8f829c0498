"""User model — a staff member of one hotel."""

import uuid
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class UserRole(StrEnum):
    ADMIN = "admin"
    STAFF = "staff"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", nullable=False, index=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(default="", max_length=255)
    role: UserRole = Field(default=UserRole.STAFF)
    is_active: bool = Field(default=True)


# ── Pydantic schemas ─────────────────────────────────────────

class UserCreate(SQLModel):
    email: str = Field(max_length=320)
    password: str = Field(min_length=8, max_length=128)
    name: str = Field(default="", max_length=255)
    role: UserRole = UserRole.STAFF


class UserUpdate(SQLModel):
    password: str | None = Field(default=None, min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(SQLModel):
    id: uuid.UUID
    hotel_id: uuid.UUID
    email: str
    name: str
    role: UserRole
    is_active: bool

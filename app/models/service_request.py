"""ServiceRequest model — one guest ask and its lifecycle status."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import TimestampMixin, load_json, new_uuid


class RequestType(StrEnum):
    CALL_SERVICE = "call-service"
    ORDER_FOOD = "order-food"
    ROOM_SERVICE = "room-service"
    COMPLAINT = "complaint"
    CUSTOM_MESSAGE = "custom-message"


class RequestStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELED = "canceled"


class RequestPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OrderLine(BaseModel):
    name: str
    price: float
    quantity: int
    total: float


class OrderDetails(BaseModel):
    items: list[OrderLine]
    total_amount: float


class ServiceRequest(TimestampMixin, SQLModel, table=True):
    __tablename__ = "service_requests"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", nullable=False, index=True)
    room_id: uuid.UUID = Field(foreign_key="rooms.id", nullable=False, index=True)
    # Captured at creation so history survives room renames.
    room_number: str = Field(max_length=32, nullable=False)
    guest_phone: str = Field(max_length=32, nullable=False)

    type: RequestType = Field(nullable=False)
    message: str = Field(sa_column=Column(Text, nullable=False))
    # OrderDetails as JSON text, order-food only.
    order_details: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    status: RequestStatus = Field(default=RequestStatus.PENDING, index=True)
    priority: RequestPriority = Field(default=RequestPriority.MEDIUM)


# ── Pydantic schemas ─────────────────────────────────────────

class ServiceRequestCreate(SQLModel):
    """Staff-initiated request for a room (by room id)."""
    room_id: uuid.UUID
    type: RequestType
    message: str = Field(min_length=1)
    guest_phone: str = Field(min_length=1, max_length=32)
    priority: RequestPriority | None = None


class ServiceRequestUpdate(SQLModel):
    status: RequestStatus | None = None
    priority: RequestPriority | None = None
    message: str | None = Field(default=None, min_length=1)
    guest_phone: str | None = Field(default=None, min_length=1, max_length=32)


class ServiceRequestRead(SQLModel):
    id: uuid.UUID
    hotel_id: uuid.UUID
    room_id: uuid.UUID
    room_number: str
    guest_phone: str
    type: RequestType
    message: str
    order_details: OrderDetails | None = None
    status: RequestStatus
    priority: RequestPriority
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_request(cls, req: ServiceRequest) -> "ServiceRequestRead":
        details = load_json(req.order_details)
        return cls(
            id=req.id,
            hotel_id=req.hotel_id,
            room_id=req.room_id,
            room_number=req.room_number,
            guest_phone=req.guest_phone,
            type=req.type,
            message=req.message,
            order_details=OrderDetails.model_validate(details) if details else None,
            status=req.status,
            priority=req.priority,
            created_at=req.created_at,
            updated_at=req.updated_at,
        )


class RequestStats(BaseModel):
    total: int
    by_status: dict[str, int]
    by_type: dict[str, int]

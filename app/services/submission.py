"""Guest submission gateway.

Turns an unauthenticated guest action into a stored ServiceRequest:

  1. Resolve the room by (hotel id, room access token)
  2. Normalize the type-specific payload into one message string, plus a
     server-priced order payload for food orders
  3. Store the request, then publish ``newRequest`` to the hotel's topic

The store write is awaited before the publish, so a dashboard never hears
about a request that is not stored yet. There is no dedup: two identical
submissions are two requests.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotFoundError, ValidationError
from app.models.hotel import Hotel, HotelPublic
from app.models.room import Room, RoomPublic
from app.models.service_request import (
    OrderDetails,
    OrderLine,
    RequestPriority,
    RequestType,
    ServiceRequest,
    ServiceRequestRead,
)
from app.services import request_store
from app.services.broker import NEW_REQUEST, NotificationBroker

logger = logging.getLogger(__name__)

CURRENCY = "₹"
DEFAULT_CALL_SERVICE_MESSAGE = "Call Service Boy request"

# RequestType -> HotelSettings.services_enabled flag
SERVICE_FLAGS = {
    RequestType.CALL_SERVICE: "call_service",
    RequestType.ORDER_FOOD: "order_food",
    RequestType.ROOM_SERVICE: "room_service",
    RequestType.COMPLAINT: "complaint",
    RequestType.CUSTOM_MESSAGE: "custom_message",
}


# ── Guest payloads (one variant per request type) ────────────

class _GuestPayload(BaseModel):
    guest_phone: str = Field(min_length=1, max_length=32)
    priority: RequestPriority | None = None


class CallServicePayload(_GuestPayload):
    type: Literal["call-service"]
    message: str | None = None


class OrderItemIn(BaseModel):
    item_id: str | None = None
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    # Client-side totals are accepted but never trusted.
    total: float | None = None


class OrderDetailsIn(BaseModel):
    items: list[OrderItemIn] = Field(min_length=1)
    total: float | None = None
    total_amount: float | None = None


class OrderFoodPayload(_GuestPayload):
    type: Literal["order-food"]
    order_details: OrderDetailsIn


class RoomServicePayload(_GuestPayload):
    type: Literal["room-service"]
    service_name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=255)
    estimated_time: str = Field(min_length=1, max_length=100)
    description: str | None = None


class ComplaintPayload(_GuestPayload):
    type: Literal["complaint"]
    complaint_name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=255)
    priority: RequestPriority = RequestPriority.HIGH
    description: str | None = None


class CustomMessagePayload(_GuestPayload):
    type: Literal["custom-message"]
    message: str = Field(min_length=1, max_length=5000)


GuestRequest = Annotated[
    CallServicePayload
    | OrderFoodPayload
    | RoomServicePayload
    | ComplaintPayload
    | CustomMessagePayload,
    Field(discriminator="type"),
]


class GuestPortal(BaseModel):
    hotel: HotelPublic
    room: RoomPublic


@dataclass
class NormalizedRequest:
    type: RequestType
    message: str
    priority: RequestPriority
    order_details: OrderDetails | None = None


# ── Normalization ────────────────────────────────────────────

def format_amount(value: float) -> str:
    """``40.0`` -> ``"40"``, ``12.5`` -> ``"12.5"``."""
    text = f"{round(value, 2):.2f}"
    return text.rstrip("0").rstrip(".")


def price_order(details: OrderDetailsIn) -> OrderDetails:
    """Recompute line totals and the grand total from price x quantity."""
    lines = [
        OrderLine(
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            total=round(item.price * item.quantity, 2),
        )
        for item in details.items
    ]
    return OrderDetails(items=lines, total_amount=round(sum(line.total for line in lines), 2))


def _or_na(text: str | None) -> str:
    return text.strip() if text and text.strip() else "N/A"


def normalize(payload: GuestRequest) -> NormalizedRequest:
    """Map a guest payload to the stored message (and order) shape."""
    priority = payload.priority or RequestPriority.MEDIUM

    if isinstance(payload, OrderFoodPayload):
        order = price_order(payload.order_details)
        lines = [
            f"{line.name} x{line.quantity} = {CURRENCY}{format_amount(line.total)}"
            for line in order.items
        ]
        message = "\n".join(
            ["Food Order:", *lines, f"Total: {CURRENCY}{format_amount(order.total_amount)}"]
        )
        return NormalizedRequest(RequestType.ORDER_FOOD, message, priority, order)

    if isinstance(payload, RoomServicePayload):
        message = (
            f"Room Service Request: {payload.service_name}\n"
            f"Category: {payload.category}\n"
            f"Estimated Time: {payload.estimated_time}\n"
            f"Description: {_or_na(payload.description)}"
        )
        return NormalizedRequest(RequestType.ROOM_SERVICE, message, priority)

    if isinstance(payload, ComplaintPayload):
        message = (
            f"Issue: {payload.complaint_name}\n"
            f"Category: {payload.category}\n"
            f"Priority: {payload.priority}\n"
            f"Description: {_or_na(payload.description)}"
        )
        return NormalizedRequest(RequestType.COMPLAINT, message, payload.priority)

    if isinstance(payload, CustomMessagePayload):
        return NormalizedRequest(
            RequestType.CUSTOM_MESSAGE, f"Message: {payload.message.strip()}", priority
        )

    message = (payload.message or "").strip() or DEFAULT_CALL_SERVICE_MESSAGE
    return NormalizedRequest(RequestType.CALL_SERVICE, message, priority)


# ── Resolution ───────────────────────────────────────────────

def _parse_hotel_id(hotel_id: str | uuid.UUID) -> uuid.UUID:
    if isinstance(hotel_id, uuid.UUID):
        return hotel_id
    try:
        return uuid.UUID(hotel_id)
    except ValueError as exc:
        raise NotFoundError("Hotel not found") from exc


async def resolve_room(
    session: AsyncSession, hotel_id: str | uuid.UUID, room_token: str
) -> tuple[Hotel, Room]:
    """Look up an active room by its access token inside one hotel."""
    hid = _parse_hotel_id(hotel_id)
    hotel = await session.get(Hotel, hid)
    if hotel is None or not hotel.is_active:
        raise NotFoundError("Hotel not found")

    stmt = select(Room).where(
        Room.hotel_id == hid,
        Room.access_token == room_token,
        Room.is_active.is_(True),  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    room = result.scalar_one_or_none()
    if room is None:
        raise NotFoundError("Room not found")
    return hotel, room


async def resolve_portal(
    session: AsyncSession, hotel_id: str | uuid.UUID, room_token: str
) -> GuestPortal:
    hotel, room = await resolve_room(session, hotel_id, room_token)
    return GuestPortal(
        hotel=HotelPublic(id=hotel.id, name=hotel.name, settings=hotel.get_settings()),
        room=RoomPublic(id=room.id, number=room.number, name=room.name),
    )


# ── Submission ───────────────────────────────────────────────

async def publish_request_event(
    broker: NotificationBroker, event: str, req: ServiceRequest
) -> int:
    """Publish a request lifecycle event; failures are logged, not raised.

    Called only after the row is committed. A failure here leaves the
    request stored but unannounced; dashboards pick it up on their next
    list fetch.
    """
    payload = ServiceRequestRead.from_request(req).model_dump(mode="json")
    try:
        return await broker.publish(req.hotel_id, event, payload)
    except Exception:
        logger.exception("Publishing %s failed for request %s (hotel %s)", event, req.id, req.hotel_id)
        return 0


async def submit(
    session: AsyncSession,
    broker: NotificationBroker,
    hotel_id: str | uuid.UUID,
    room_token: str,
    payload: GuestRequest,
) -> ServiceRequest:
    """Resolve, normalize, store, publish. One write and one publish."""
    hotel, room = await resolve_room(session, hotel_id, room_token)

    normalized = normalize(payload)
    flag = SERVICE_FLAGS[normalized.type]
    if not getattr(hotel.get_settings().services_enabled, flag):
        raise ValidationError("This service is currently unavailable")

    req = await request_store.create(session, {
        "hotel_id": hotel.id,
        "room_id": room.id,
        "room_number": room.number,
        "guest_phone": payload.guest_phone.strip(),
        "type": normalized.type,
        "message": normalized.message,
        "order_details": normalized.order_details,
        "priority": normalized.priority,
    })
    logger.info(
        "Guest request %s (%s) stored for hotel %s room %s",
        req.id, req.type, hotel.id, room.number,
    )

    await publish_request_event(broker, NEW_REQUEST, req)
    return req

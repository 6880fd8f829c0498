"""Service requests for staff dashboards — all scoped to the path hotel."""

import uuid
from typing import Literal

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlmodel import select

from app.api.deps import Broker, HotelScope, Session
from app.models.hotel import Hotel
from app.models.room import Room
from app.models.service_request import (
    RequestStats,
    ServiceRequestCreate,
    ServiceRequestRead,
    ServiceRequestUpdate,
)
from app.services import request_store
from app.services.broker import NEW_REQUEST, REQUEST_UPDATED
from app.services.reply_assistant import draft_reply
from app.services.submission import publish_request_event

router = APIRouter(prefix="/hotels/{hotel_id}/requests", tags=["requests"])


class SuggestReplyRequest(BaseModel):
    tone: Literal["professional", "friendly", "apologetic"] = "professional"


class SuggestReplyResponse(BaseModel):
    reply: str
    model: str


@router.get("", response_model=list[ServiceRequestRead])
async def list_requests(
    hotel_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> list[ServiceRequestRead]:
    """All requests for the hotel, newest first."""
    rows = await request_store.list_by_tenant(session, hotel_id)
    return [ServiceRequestRead.from_request(r) for r in rows]


@router.get("/stats", response_model=RequestStats)
async def request_stats(
    hotel_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> RequestStats:
    return await request_store.status_counts(session, hotel_id)


@router.post("", response_model=ServiceRequestRead, status_code=status.HTTP_201_CREATED)
async def create_request(
    hotel_id: uuid.UUID,
    body: ServiceRequestCreate,
    auth: HotelScope,
    session: Session,
    broker: Broker,
) -> ServiceRequestRead:
    """Staff-initiated request on behalf of a room."""
    stmt = select(Room).where(Room.id == body.room_id, Room.hotel_id == hotel_id)
    room = (await session.execute(stmt)).scalar_one_or_none()
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    req = await request_store.create(session, {
        "hotel_id": hotel_id,
        "room_id": room.id,
        "room_number": room.number,
        "guest_phone": body.guest_phone,
        "type": body.type,
        "message": body.message,
        "priority": body.priority,
    })
    await publish_request_event(broker, NEW_REQUEST, req)
    return ServiceRequestRead.from_request(req)


@router.put("/{request_id}", response_model=ServiceRequestRead)
async def update_request(
    hotel_id: uuid.UUID,
    request_id: uuid.UUID,
    body: ServiceRequestUpdate,
    auth: HotelScope,
    session: Session,
    broker: Broker,
) -> ServiceRequestRead:
    """Partial update (status, priority, ...); announces ``requestUpdated``."""
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    req = await request_store.update_fields(session, hotel_id, request_id, fields)
    await publish_request_event(broker, REQUEST_UPDATED, req)
    return ServiceRequestRead.from_request(req)


@router.post("/{request_id}/suggest-reply", response_model=SuggestReplyResponse)
async def suggest_reply(
    hotel_id: uuid.UUID,
    request_id: uuid.UUID,
    body: SuggestReplyRequest,
    auth: HotelScope,
    session: Session,
) -> SuggestReplyResponse:
    """Draft a reply to the guest with the configured LLM."""
    req = await request_store.get(session, hotel_id, request_id)
    hotel = await session.get(Hotel, hotel_id)
    if hotel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hotel not found")

    draft = await draft_reply(hotel, req, tone=body.tone)
    return SuggestReplyResponse(reply=draft.reply, model=draft.model)

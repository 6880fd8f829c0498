"""Room management — all queries scoped to the hotel in the path."""

import uuid

from fastapi import APIRouter, HTTPException, status
from sqlmodel import select

from app.api.deps import HotelScope, Session
from app.core.security import generate_room_token
from app.models.base import utcnow
from app.models.room import Room, RoomCreate, RoomRead, RoomUpdate
from app.services.qr import guest_url, qr_data_url

router = APIRouter(prefix="/hotels/{hotel_id}/rooms", tags=["rooms"])


def _to_read(room: Room) -> RoomRead:
    return RoomRead(
        id=room.id,
        hotel_id=room.hotel_id,
        number=room.number,
        name=room.name,
        access_token=room.access_token,
        qr_code=room.qr_code,
        guest_url=guest_url(str(room.hotel_id), room.access_token),
        is_active=room.is_active,
        created_at=room.created_at,
        updated_at=room.updated_at,
    )


@router.get("", response_model=list[RoomRead])
async def list_rooms(
    hotel_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> list[RoomRead]:
    stmt = (
        select(Room)
        .where(Room.hotel_id == hotel_id)
        .order_by(Room.number.asc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return [_to_read(room) for room in result.scalars().all()]


@router.post("", response_model=RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    hotel_id: uuid.UUID,
    body: RoomCreate,
    auth: HotelScope,
    session: Session,
) -> RoomRead:
    """Create a room, or bring back a deactivated one with the same number.

    A revived room gets a fresh token, so QR codes printed before it was
    deleted keep failing.
    """
    token = generate_room_token()
    qr_code = qr_data_url(guest_url(str(hotel_id), token))
    name = body.name or f"Room {body.number}"

    room = await _find_by_number(hotel_id, body.number, session)
    if room is not None and room.is_active:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room number already exists",
        )
    if room is None:
        room = Room(
            hotel_id=hotel_id,
            number=body.number,
            name=name,
            access_token=token,
            qr_code=qr_code,
        )
    else:
        room.name = name
        room.access_token = token
        room.qr_code = qr_code
        room.is_active = True
        room.updated_at = utcnow()
    session.add(room)
    await session.commit()
    await session.refresh(room)
    return _to_read(room)


@router.put("/{room_id}", response_model=RoomRead)
async def update_room(
    hotel_id: uuid.UUID,
    room_id: uuid.UUID,
    body: RoomUpdate,
    auth: HotelScope,
    session: Session,
) -> RoomRead:
    room = await _get_or_404(room_id, hotel_id, session)

    update_data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "number" in update_data and update_data["number"] != room.number:
        await _ensure_number_free(hotel_id, update_data["number"], session)

    for field, value in update_data.items():
        setattr(room, field, value)

    room.updated_at = utcnow()
    session.add(room)
    await session.commit()
    await session.refresh(room)
    return _to_read(room)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    hotel_id: uuid.UUID,
    room_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> None:
    """Deactivate the room; its QR code stops resolving, history stays."""
    room = await _get_or_404(room_id, hotel_id, session)
    room.is_active = False
    room.updated_at = utcnow()
    session.add(room)
    await session.commit()


# ── Internal helpers ──────────────────────────────────────────

async def _find_by_number(hotel_id: uuid.UUID, number: str, session) -> Room | None:
    stmt = select(Room).where(Room.hotel_id == hotel_id, Room.number == number)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _ensure_number_free(hotel_id: uuid.UUID, number: str, session) -> None:
    # Deactivated rooms keep their number until they are revived.
    if await _find_by_number(hotel_id, number, session) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room number already exists",
        )


async def _get_or_404(room_id: uuid.UUID, hotel_id: uuid.UUID, session) -> Room:
    stmt = select(Room).where(
        Room.id == room_id,
        Room.hotel_id == hotel_id,
    )
    result = await session.execute(stmt)
    room = result.scalar_one_or_none()
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room

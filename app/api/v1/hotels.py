"""Hotel profile and settings."""

import uuid

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from app.api.deps import HotelScope, Session, require_admin
from app.models.base import utcnow
from app.models.hotel import Hotel, HotelRead, HotelUpdate

router = APIRouter(prefix="/hotels", tags=["hotels"])


@router.get("/{hotel_id}", response_model=HotelRead)
async def get_hotel(
    hotel_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> HotelRead:
    hotel = await _get_or_404(hotel_id, session)
    return HotelRead.from_hotel(hotel)


@router.put("/{hotel_id}", response_model=HotelRead)
async def update_hotel(
    hotel_id: uuid.UUID,
    body: HotelUpdate,
    auth: HotelScope,
    session: Session,
) -> HotelRead:
    """Partial update; ``settings`` is merged section by section."""
    require_admin(auth)
    hotel = await _get_or_404(hotel_id, session)

    update_data = body.model_dump(exclude_unset=True)
    if "settings" in update_data:
        partial = update_data.pop("settings")
        if partial:
            try:
                hotel.merge_settings(partial)
            except PydanticValidationError as exc:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid settings document",
                ) from exc

    for field, value in update_data.items():
        if value is not None:
            setattr(hotel, field, value)

    hotel.updated_at = utcnow()
    session.add(hotel)
    await session.commit()
    await session.refresh(hotel)
    return HotelRead.from_hotel(hotel)


# ── Internal helper ───────────────────────────────────────────

async def _get_or_404(hotel_id: uuid.UUID, session) -> Hotel:
    hotel = await session.get(Hotel, hotel_id)
    if hotel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hotel not found")
    return hotel

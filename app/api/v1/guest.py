"""Guest portal endpoints — unauthenticated, reached through room QR codes."""

from fastapi import APIRouter, status

from app.api.deps import Broker, Session
from app.models.service_request import ServiceRequestRead
from app.services import submission
from app.services.submission import GuestPortal, GuestRequest

router = APIRouter(prefix="/guest", tags=["guest"])


@router.get("/{hotel_id}/{room_token}", response_model=GuestPortal)
async def get_portal(hotel_id: str, room_token: str, session: Session) -> GuestPortal:
    """Hotel and room display data for the portal page."""
    return await submission.resolve_portal(session, hotel_id, room_token)


@router.post(
    "/{hotel_id}/{room_token}/request",
    response_model=ServiceRequestRead,
    status_code=status.HTTP_201_CREATED,
)
async def submit_request(
    hotel_id: str,
    room_token: str,
    body: GuestRequest,
    session: Session,
    broker: Broker,
) -> ServiceRequestRead:
    """Store a guest request and notify the hotel's dashboards."""
    req = await submission.submit(session, broker, hotel_id, room_token, body)
    return ServiceRequestRead.from_request(req)

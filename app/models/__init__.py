"""Import all models so SQLModel.metadata picks them up."""

from app.models.hotel import (
    Hotel,
    HotelPlan,
    HotelPublic,
    HotelRead,
    HotelSettings,
    HotelUpdate,
)
from app.models.room import Room, RoomCreate, RoomPublic, RoomRead, RoomUpdate
from app.models.service_request import (
    OrderDetails,
    OrderLine,
    RequestPriority,
    RequestStats,
    RequestStatus,
    RequestType,
    ServiceRequest,
    ServiceRequestCreate,
    ServiceRequestRead,
    ServiceRequestUpdate,
)
from app.models.user import User, UserCreate, UserRead, UserRole, UserUpdate

__all__ = [
    "Hotel",
    "HotelPlan",
    "HotelPublic",
    "HotelRead",
    "HotelSettings",
    "HotelUpdate",
    "OrderDetails",
    "OrderLine",
    "RequestPriority",
    "RequestStats",
    "RequestStatus",
    "RequestType",
    "Room",
    "RoomCreate",
    "RoomPublic",
    "RoomRead",
    "RoomUpdate",
    "ServiceRequest",
    "ServiceRequestCreate",
    "ServiceRequestRead",
    "ServiceRequestUpdate",
    "User",
    "UserCreate",
    "UserRead",
    "UserRole",
    "UserUpdate",
]

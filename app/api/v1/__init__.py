"""V1 API router aggregation."""

from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.guest import router as guest_router
from app.api.v1.hotels import router as hotels_router
from app.api.v1.realtime import router as realtime_router
from app.api.v1.requests import router as requests_router
from app.api.v1.rooms import router as rooms_router
from app.api.v1.users import router as users_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(hotels_router)
v1_router.include_router(rooms_router)
v1_router.include_router(users_router)
v1_router.include_router(requests_router)
v1_router.include_router(guest_router)
v1_router.include_router(realtime_router)

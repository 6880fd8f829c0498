"""Authentication endpoints — hotel registration, login, current user."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import select

from app.api.deps import Auth, Session
from app.core.security import create_jwt, hash_password, verify_password
from app.models.hotel import Hotel, HotelRead
from app.models.user import User, UserRead, UserRole

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    """Everything needed to create a hotel and its first admin in one call."""
    hotel_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    phone: str = Field(min_length=1, max_length=32)
    address: str = Field(default="", max_length=1000)
    total_rooms: int = Field(default=0, ge=0)
    admin_name: str = Field(default="", max_length=255)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    hotel: HotelRead


class MeResponse(BaseModel):
    user: UserRead
    hotel: HotelRead


def _token_for(user: User) -> str:
    return create_jwt(
        subject=str(user.id),
        tenant_id=str(user.hotel_id),
        role=user.role,
    )


# ── Routes ───────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new hotel and its admin",
)
async def register(body: RegisterRequest, session: Session) -> TokenResponse:
    """Create a hotel and its admin user, and log the admin in."""
    existing_hotel = await session.execute(select(Hotel).where(Hotel.email == body.email))
    existing_user = await session.execute(select(User).where(User.email == body.email))
    if existing_hotel.scalar_one_or_none() or existing_user.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Hotel already registered with this email",
        )

    hotel = Hotel(
        name=body.hotel_name,
        email=body.email,
        phone=body.phone,
        address=body.address,
        total_rooms=body.total_rooms,
    )
    session.add(hotel)
    await session.flush()  # populate hotel.id

    user = User(
        hotel_id=hotel.id,
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.admin_name,
        role=UserRole.ADMIN,
    )
    session.add(user)
    await session.commit()
    await session.refresh(hotel)
    await session.refresh(user)

    return TokenResponse(
        access_token=_token_for(user),
        user=UserRead.model_validate(user),
        hotel=HotelRead.from_hotel(hotel),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: Session) -> TokenResponse:
    """Authenticate with email + password, receive a JWT."""
    stmt = select(User).where(User.email == body.email)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    hotel = await session.get(Hotel, user.hotel_id)
    if hotel is None or not hotel.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Hotel is disabled",
        )

    return TokenResponse(
        access_token=_token_for(user),
        user=UserRead.model_validate(user),
        hotel=HotelRead.from_hotel(hotel),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Return the current authenticated user and their hotel."""
    user = await session.get(User, auth.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    hotel = await session.get(Hotel, auth.hotel_id)
    if hotel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hotel not found")

    return MeResponse(
        user=UserRead.model_validate(user),
        hotel=HotelRead.from_hotel(hotel),
    )

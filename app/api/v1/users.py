"""Staff users — hotel-scoped, restricted to hotel admins."""

import uuid

from fastapi import APIRouter, HTTPException, status
from sqlmodel import select

from app.api.deps import HotelScope, Session, require_admin
from app.core.security import hash_password
from app.models.base import utcnow
from app.models.user import User, UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/hotels/{hotel_id}/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    hotel_id: uuid.UUID,
    body: UserCreate,
    auth: HotelScope,
    session: Session,
) -> UserRead:
    require_admin(auth)

    # Login is by email alone, so emails are unique across hotels.
    result = await session.execute(select(User).where(User.email == body.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists",
        )

    user = User(
        hotel_id=hotel_id,
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.name,
        role=body.role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return UserRead.model_validate(user)


@router.get("", response_model=list[UserRead])
async def list_users(
    hotel_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> list[UserRead]:
    stmt = (
        select(User)
        .where(User.hotel_id == hotel_id)
        .order_by(User.email.asc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return [UserRead.model_validate(u) for u in result.scalars().all()]


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    hotel_id: uuid.UUID,
    user_id: uuid.UUID,
    body: UserUpdate,
    auth: HotelScope,
    session: Session,
) -> UserRead:
    require_admin(auth)
    user = await _get_or_404(user_id, hotel_id, session)

    update_data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "password" in update_data:
        user.password_hash = hash_password(update_data.pop("password"))
    for field, value in update_data.items():
        setattr(user, field, value)

    user.updated_at = utcnow()
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return UserRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_user(
    hotel_id: uuid.UUID,
    user_id: uuid.UUID,
    auth: HotelScope,
    session: Session,
) -> None:
    require_admin(auth)
    if user_id == auth.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate your own account",
        )
    user = await _get_or_404(user_id, hotel_id, session)
    user.is_active = False
    user.updated_at = utcnow()
    session.add(user)
    await session.commit()


# ── Internal helper ───────────────────────────────────────────

async def _get_or_404(
    user_id: uuid.UUID, hotel_id: uuid.UUID, session
) -> User:
    stmt = select(User).where(
        User.id == user_id,
        User.hotel_id == hotel_id,
    )
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

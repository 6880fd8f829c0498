"""FastAPI dependencies for authentication and hotel scoping."""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import AuthError
from app.core.security import decode_jwt
from app.models.user import UserRole
from app.services.broker import NotificationBroker, get_broker

bearer_scheme = HTTPBearer()


class AuthContext:
    """Resolved staff identity carried through a request."""

    __slots__ = ("hotel_id", "user_id", "user_role")

    def __init__(
        self,
        hotel_id: uuid.UUID,
        user_id: uuid.UUID,
        user_role: str,
    ) -> None:
        self.hotel_id = hotel_id
        self.user_id = user_id
        self.user_role = user_role

    @property
    def is_admin(self) -> bool:
        return self.user_role == UserRole.ADMIN


def authenticate_token(token: str) -> AuthContext:
    """Decode a staff JWT. Raises AuthError; shared by HTTP and realtime."""
    try:
        payload = decode_jwt(token)
    except JWTError as exc:
        raise AuthError("Invalid or expired token") from exc

    try:
        return AuthContext(
            hotel_id=uuid.UUID(payload["tid"]),
            user_id=uuid.UUID(payload["sub"]),
            user_role=payload.get("role", UserRole.STAFF),
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise AuthError("Malformed token payload") from exc


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> AuthContext:
    """Resolve a bearer token to an AuthContext."""
    try:
        return authenticate_token(credentials.credentials)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
        ) from exc


async def get_hotel_scope(
    hotel_id: uuid.UUID,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Reject tokens issued for a different hotel than the path names."""
    if auth.hotel_id != hotel_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed for this hotel",
        )
    return auth


def require_admin(auth: AuthContext) -> None:
    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only hotel admins can do this",
        )


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
HotelScope = Annotated[AuthContext, Depends(get_hotel_scope)]
Session = Annotated[AsyncSession, Depends(get_session)]
Broker = Annotated[NotificationBroker, Depends(get_broker)]

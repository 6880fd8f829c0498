"""Request store — tenant-scoped persistence of service requests.

A plain persistence layer: it checks that required fields are present and
that ids resolve inside the hotel, nothing more. Which status transitions
are legal is decided by callers, not here. Notifications are the caller's
job too; nothing in this module talks to the broker.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core import cache
from app.core.errors import InternalError, NotFoundError, ValidationError
from app.models.base import dump_json, utcnow
from app.models.service_request import (
    OrderDetails,
    RequestPriority,
    RequestStats,
    RequestStatus,
    RequestType,
    ServiceRequest,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("hotel_id", "room_id", "room_number", "type", "message", "guest_phone")

# Fields a staff update may touch; everything else is fixed at creation.
UPDATABLE_FIELDS = frozenset({"status", "priority", "message", "guest_phone"})

STATS_CACHE_NS = "request-stats"


async def list_by_tenant(session: AsyncSession, hotel_id: uuid.UUID) -> list[ServiceRequest]:
    """All requests of one hotel, newest first."""
    stmt = (
        select(ServiceRequest)
        .where(ServiceRequest.hotel_id == hotel_id)
        .order_by(
            ServiceRequest.created_at.desc(),  # type: ignore[union-attr]
            ServiceRequest.id.desc(),  # type: ignore[union-attr]
        )
    )
    try:
        result = await session.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Listing requests failed for hotel %s", hotel_id)
        raise InternalError() from exc
    return list(result.scalars().all())


async def get(
    session: AsyncSession, hotel_id: uuid.UUID, request_id: uuid.UUID
) -> ServiceRequest:
    stmt = select(ServiceRequest).where(
        ServiceRequest.id == request_id,
        ServiceRequest.hotel_id == hotel_id,
    )
    result = await session.execute(stmt)
    req = result.scalar_one_or_none()
    if req is None:
        raise NotFoundError("Request not found")
    return req


async def create(session: AsyncSession, record: dict[str, Any]) -> ServiceRequest:
    """Persist a new request and return it with id and timestamps."""
    missing = [name for name in REQUIRED_FIELDS if not record.get(name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    order_details = record.get("order_details")
    if isinstance(order_details, OrderDetails):
        order_details = order_details.model_dump()

    req = ServiceRequest(
        hotel_id=record["hotel_id"],
        room_id=record["room_id"],
        room_number=record["room_number"],
        guest_phone=record["guest_phone"],
        type=RequestType(record["type"]),
        message=record["message"],
        order_details=dump_json(order_details) if order_details else None,
        status=RequestStatus(record.get("status") or RequestStatus.PENDING),
        priority=RequestPriority(record.get("priority") or RequestPriority.MEDIUM),
    )
    session.add(req)
    try:
        await session.commit()
        await session.refresh(req)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(
            "Storing request failed for hotel %s room %s",
            record["hotel_id"], record["room_id"],
        )
        raise InternalError() from exc

    cache.invalidate_hotel(req.hotel_id)
    return req


async def update_fields(
    session: AsyncSession,
    hotel_id: uuid.UUID,
    request_id: uuid.UUID,
    fields: dict[str, Any],
) -> ServiceRequest:
    """Merge a partial set of fields into one request of this hotel."""
    req = await get(session, hotel_id, request_id)

    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    for name, value in fields.items():
        if value is None:
            continue
        setattr(req, name, value)

    req.updated_at = utcnow()
    session.add(req)
    try:
        await session.commit()
        await session.refresh(req)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Updating request %s failed for hotel %s", request_id, hotel_id)
        raise InternalError() from exc

    cache.invalidate_hotel(hotel_id)
    return req


async def status_counts(session: AsyncSession, hotel_id: uuid.UUID) -> RequestStats:
    """Per-status and per-type counts, cached until the next write."""
    cached = cache.get(STATS_CACHE_NS, hotel_id)
    if cached is not None:
        return cached

    by_status = {s.value: 0 for s in RequestStatus}
    by_type = {t.value: 0 for t in RequestType}

    status_stmt = (
        select(ServiceRequest.status, func.count())
        .where(ServiceRequest.hotel_id == hotel_id)
        .group_by(ServiceRequest.status)
    )
    for status, count in (await session.execute(status_stmt)).all():
        by_status[RequestStatus(status).value] = count

    type_stmt = (
        select(ServiceRequest.type, func.count())
        .where(ServiceRequest.hotel_id == hotel_id)
        .group_by(ServiceRequest.type)
    )
    for req_type, count in (await session.execute(type_stmt)).all():
        by_type[RequestType(req_type).value] = count

    stats = RequestStats(total=sum(by_status.values()), by_status=by_status, by_type=by_type)
    cache.put(STATS_CACHE_NS, hotel_id, stats)
    return stats

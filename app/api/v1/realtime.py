"""Realtime channel for staff dashboards.

Protocol (JSON text frames):

  client -> server   {"event": "joinHotel", "hotel_id": "<uuid>", "token": "<jwt>"}
                     {"event": "leaveHotel"}
                     {"event": "ping"}
  server -> client   {"event": "joined", "data": {"hotel_id": "..."}}
                     {"event": "newRequest" | "requestUpdated", "data": <request>}
                     {"event": "error", "data": {"detail": "..."}}

The token may also be passed once as ``?token=`` when connecting. A join is
accepted only for the hotel the token was issued for; a rejected join leaves
the current membership untouched.
"""

import asyncio
import logging
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from redis.exceptions import RedisError

from app.api.deps import AuthContext, Broker, authenticate_token
from app.core.errors import AuthError
from app.services.broker import NotificationBroker, Subscriber

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

JOIN_EVENTS = ("joinHotel", "joinTenant")


def _error(detail: str) -> dict:
    return {"event": "error", "data": {"detail": detail}}


def _reply(subscriber: Subscriber, message: dict) -> None:
    """Queue a control reply behind any pending events."""
    if not subscriber.deliver(message):
        logger.warning(
            "Reply %s to subscriber %s dropped: outbound queue full",
            message.get("event"), subscriber.id,
        )


async def _writer(websocket: WebSocket, broker: NotificationBroker, subscriber: Subscriber) -> None:
    """Drain the subscriber's mailbox onto the socket.

    Whatever stops the writer, the subscriber leaves its topic, so a dead
    socket never keeps receiving events.
    """
    try:
        while True:
            item = await subscriber.queue.get()
            if item is None:
                # Dropped by the broker (mailbox overflow or lost subscription).
                await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
                return
            await websocket.send_json(item)
    except (WebSocketDisconnect, RuntimeError):
        logger.debug("Writer for subscriber %s stopped: socket gone", subscriber.id)
    except Exception:
        logger.exception("Writer for subscriber %s failed", subscriber.id)
    finally:
        await broker.leave(subscriber)


async def _handle_join(
    broker: NotificationBroker,
    subscriber: Subscriber,
    message: dict,
    connect_auth: AuthContext | None,
) -> dict:
    raw_hotel = message.get("hotel_id") or message.get("hotelId")
    try:
        hotel_id = uuid.UUID(str(raw_hotel))
    except ValueError:
        return _error("A valid hotel_id is required")

    token = message.get("token")
    try:
        auth = authenticate_token(token) if token else connect_auth
    except AuthError as exc:
        return _error(exc.detail)
    if auth is None:
        return _error("Authentication required")
    if auth.hotel_id != hotel_id:
        logger.warning(
            "Subscriber %s refused join of hotel %s (token for hotel %s)",
            subscriber.id, hotel_id, auth.hotel_id,
        )
        return _error("Not allowed for this hotel")

    subscriber.user_id = auth.user_id
    try:
        await broker.join(subscriber, hotel_id)
    except RedisError:
        logger.exception("Subscriber %s could not join hotel %s", subscriber.id, hotel_id)
        return _error("Realtime updates are unavailable")
    return {"event": "joined", "data": {"hotel_id": str(hotel_id)}}


@router.websocket("/realtime")
async def realtime(websocket: WebSocket, broker: Broker, token: str | None = None) -> None:
    await websocket.accept()
    subscriber = Subscriber()
    logger.info("Realtime subscriber %s connected", subscriber.id)

    connect_auth: AuthContext | None = None
    if token:
        try:
            connect_auth = authenticate_token(token)
        except AuthError as exc:
            _reply(subscriber, _error(exc.detail))

    writer = asyncio.create_task(_writer(websocket, broker, subscriber))
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                _reply(subscriber, _error("Frames must be JSON objects"))
                continue
            if not isinstance(message, dict):
                _reply(subscriber, _error("Frames must be JSON objects"))
                continue

            event = message.get("event")
            if event in JOIN_EVENTS:
                reply = await _handle_join(broker, subscriber, message, connect_auth)
            elif event == "leaveHotel":
                await broker.leave(subscriber)
                reply = {"event": "left", "data": {}}
            elif event == "ping":
                reply = {"event": "pong", "data": {}}
            else:
                reply = _error(f"Unknown event: {event}")
            _reply(subscriber, reply)
    except WebSocketDisconnect:
        logger.info("Realtime subscriber %s disconnected", subscriber.id)
    except RuntimeError:
        # Socket already closed by the writer after an overflow drop.
        logger.info("Realtime subscriber %s closed after overflow", subscriber.id)
    finally:
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)
        await broker.leave(subscriber)

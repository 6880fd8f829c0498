"""Lightweight in-memory TTL cache for per-hotel dashboard summaries.

Entries are keyed by ``(namespace, hotel_id)``. Any write to a hotel's
requests calls :func:`invalidate_hotel`, so a cached summary never outlives
a write.
"""

import time
import uuid
from typing import Any

_cache: dict[tuple[str, uuid.UUID], tuple[float, Any]] = {}

# Default TTL in seconds
DEFAULT_TTL = 30


def get(namespace: str, hotel_id: uuid.UUID, ttl: float = DEFAULT_TTL) -> Any | None:
    """Return the cached value if present and not expired, else None."""
    key = (namespace, hotel_id)
    entry = _cache.get(key)
    if entry is None:
        return None
    stored_at, value = entry
    if time.monotonic() - stored_at > ttl:
        _cache.pop(key, None)
        return None
    return value


def put(namespace: str, hotel_id: uuid.UUID, value: Any) -> None:
    _cache[(namespace, hotel_id)] = (time.monotonic(), value)


def invalidate_hotel(hotel_id: uuid.UUID) -> None:
    """Drop every cached entry belonging to one hotel."""
    for key in [k for k in _cache if k[1] == hotel_id]:
        _cache.pop(key, None)


def clear() -> None:
    _cache.clear()

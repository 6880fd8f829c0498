"""QR code images for room guest-portal links."""

import base64
import io

import qrcode

from app.core.config import get_settings


def guest_url(hotel_id: str, room_token: str) -> str:
    base = get_settings().client_url.rstrip("/")
    return f"{base}/guest/{hotel_id}/{room_token}"


def qr_data_url(target_url: str) -> str:
    """Render ``target_url`` as a PNG QR code and return it as a data URL."""
    img = qrcode.make(target_url, box_size=10, border=4)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()

"""Draft a short staff reply to a guest request via LiteLLM."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from litellm import acompletion

from app.core.config import get_settings
from app.core.errors import InternalError
from app.models.hotel import Hotel
from app.models.service_request import ServiceRequest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the front desk of {hotel}. Write a short, polite reply to a guest "
    "about their request. Plain text, at most three sentences, no placeholders."
)

TONES = ("professional", "friendly", "apologetic")


@dataclass
class ReplyDraft:
    reply: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


def _build_messages(hotel: Hotel, req: ServiceRequest, tone: str) -> list[dict]:
    details = (
        f"Room {req.room_number}\n"
        f"Request type: {req.type}\n"
        f"Status: {req.status}\n"
        f"Priority: {req.priority}\n"
        f"Guest message:\n{req.message}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(hotel=hotel.name)},
        {"role": "user", "content": f"Tone: {tone}\n\n{details}"},
    ]


async def draft_reply(
    hotel: Hotel,
    req: ServiceRequest,
    tone: str = "professional",
    model: str | None = None,
) -> ReplyDraft:
    model = model or get_settings().default_llm_model
    try:
        response = await acompletion(
            model=model,
            messages=_build_messages(hotel, req, tone),
            temperature=0.4,
            max_tokens=200,
        )
    except Exception as exc:
        logger.exception("Reply generation failed for request %s (hotel %s)", req.id, hotel.id)
        raise InternalError("Reply generation is unavailable") from exc

    content = (response.choices[0].message.content or "").strip()
    usage = response.usage
    return ReplyDraft(
        reply=content,
        model=model,
        prompt_tokens=usage.prompt_tokens if usage else 0,
        completion_tokens=usage.completion_tokens if usage else 0,
    )

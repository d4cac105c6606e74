"""
Image search: ask Gemini to identify a car from a photo.

Calls the Gemini ``generateContent`` REST endpoint and returns a best-effort
guess of the listing attributes. Any failure (missing key, HTTP error,
timeout, quota, unparseable reply) raises UpstreamError. Each user gets a
fixed number of searches per hour, tracked on their row.
"""

import base64
import json
import logging
import math
import re
from datetime import datetime

import httpx
from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from backend.config.settings import get_settings
from backend.database.models import User
from backend.services.errors import RateLimitError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """
Analyze this car image and extract the following information:
1. Brand (manufacturer)
2. Model
3. Year (approximately)
4. Color
5. Body type (SUV, Sedan, Hatchback, etc.)
6. Mileage
7. Fuel type (your best guess)
8. Transmission type (your best guess)
9. Price (your best guess)
10. Short description as to be added to a car listing

Format your response as a clean JSON object with these fields:
{
  "brand": "",
  "model": "",
  "year": 0000,
  "color": "",
  "price": "",
  "mileage": "",
  "bodyType": "",
  "fuelType": "",
  "transmission": "",
  "description": "",
  "confidence": 0.0
}

For confidence, provide a value between 0 and 1 representing how confident you are in your overall identification.
Only respond with the JSON object, nothing else.
"""

STRING_FIELDS = (
    "brand", "model", "color", "price", "mileage",
    "bodyType", "fuelType", "transmission", "description",
)

_FENCE_RE = re.compile(r"```(?:json)?\n?")


def validate_image(image_bytes: bytes, mime_type: str | None) -> None:
    if not image_bytes:
        raise ValidationError("Image file is empty")
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError("Uploaded file must be an image")
    max_bytes = get_settings().image_search_max_bytes
    if len(image_bytes) > max_bytes:
        raise ValidationError(f"Image must be at most {max_bytes // (1024 * 1024)}MB")


def _current_window() -> datetime:
    return datetime.utcnow().replace(minute=0, second=0, microsecond=0)


def consume_image_search_quota(user: User, db: Session) -> None:
    """Count one image search against the user's hourly allowance.

    The counter lives on the user row and is reset when a new hour starts.
    The increment is a conditional UPDATE, so concurrent requests can never
    push the count past the limit.
    """
    limit = get_settings().image_search_hourly_limit
    window = _current_window()

    db.execute(
        update(User)
        .where(
            User.id == user.id,
            or_(User.image_search_window.is_(None), User.image_search_window != window),
        )
        .values(image_search_window=window, image_search_count=0)
    )
    result = db.execute(
        update(User)
        .where(
            User.id == user.id,
            User.image_search_window == window,
            User.image_search_count < limit,
        )
        .values(image_search_count=User.image_search_count + 1)
    )
    db.commit()

    if result.rowcount == 0:
        logger.warning("Image search rate limit exceeded for user %s", user.id)
        raise RateLimitError("Too many requests. Please try again later.")


def _reject_constant(name: str):
    raise ValueError(f"Non-finite JSON constant {name}")


def parse_model_reply(text: str) -> dict:
    """Strip Markdown fences from the model reply and normalize the JSON guess."""
    cleaned = _FENCE_RE.sub("", text or "").strip()
    try:
        # NaN / Infinity are not valid JSON
        raw = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError:
        raise UpstreamError("Failed to parse AI response")
    if not isinstance(raw, dict):
        raise UpstreamError("Failed to parse AI response")

    result = {}
    for field in STRING_FIELDS:
        value = raw.get(field)
        result[field] = "" if value is None else str(value).strip()

    try:
        result["year"] = int(raw.get("year")) or None
    except (TypeError, ValueError, OverflowError):
        result["year"] = None

    try:
        confidence = float(raw.get("confidence", 0))
    except (TypeError, ValueError):
        confidence = 0.0
    if not math.isfinite(confidence):
        confidence = 0.0
    result["confidence"] = min(max(confidence, 0.0), 1.0)
    return result


def _reply_text(payload: dict) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise UpstreamError("AI service returned no answer")
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


async def process_image_search(image_bytes: bytes, mime_type: str | None) -> dict:
    """Identify the car in the image. Returns the normalized attribute guess."""
    validate_image(image_bytes, mime_type)

    settings = get_settings()
    if not settings.gemini_api_key:
        raise UpstreamError("Gemini API key is not configured")

    url = f"{settings.gemini_base_url}/models/{settings.gemini_model}:generateContent"
    body = {
        "contents": [{
            "parts": [
                {"inline_data": {
                    "mime_type": mime_type,
                    "data": base64.b64encode(image_bytes).decode("ascii"),
                }},
                {"text": EXTRACTION_PROMPT},
            ],
        }],
    }
    headers = {"x-goog-api-key": settings.gemini_api_key}

    try:
        async with httpx.AsyncClient(timeout=settings.gemini_timeout_seconds) as client:
            resp = await client.post(url, json=body, headers=headers)
            resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.warning("Gemini image search failed with HTTP %s", status)
        if status == 429:
            raise UpstreamError("Too many requests. Please try again later.")
        raise UpstreamError("AI Search error: upstream service unavailable")
    except httpx.HTTPError:
        logger.exception("Gemini image search request failed")
        raise UpstreamError("AI Search error: upstream service unavailable")

    try:
        payload = resp.json()
    except ValueError:
        raise UpstreamError("Failed to parse AI response")

    result = parse_model_reply(_reply_text(payload))
    logger.info(
        "Image search identified %s %s (confidence %.2f)",
        result["brand"] or "?", result["model"] or "?", result["confidence"],
    )
    return result

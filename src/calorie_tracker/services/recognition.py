"""Food recognition from photos via a vision-capable LLM."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from calorie_tracker.domain.errors import RecognitionError
from calorie_tracker.domain.food import FoodCandidate

RECOGNITION_PROMPT = (
    "Analyze this food image and provide the following information "
    "in JSON format ONLY:\n"
    "- name: The name of the food\n"
    "- calories: Estimated calories per serving\n"
    "- protein: Grams of protein\n"
    "- carbs: Grams of carbohydrates\n"
    "- fat: Grams of fat\n\n"
    "Return ONLY the JSON object, no other text."
)

REQUIRED_KEYS = ("name", "calories", "protein", "carbs", "fat")

DEFAULT_FAILURE_MESSAGE = "Please try again with a clearer image"
MISSING_KEY_MESSAGE = (
    "OpenRouter API key is not configured. Please check your .env file."
)

_STATUS_MESSAGES = {
    400: "Invalid request format. Please try with a different image.",
    401: "Invalid API key. Please check your OpenRouter API key configuration.",
    413: "Image file is too large. Please try a smaller image.",
    429: "Too many requests. Please try again later.",
}

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for a chat model that can look at images."""

    async def complete(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Return the model's raw text reply."""


@dataclass
class RecognitionService:
    """Sends a food photo to the vision client and decodes the reply."""

    client: VisionClient | None
    model: str
    max_image_bytes: int = 5 * 1024 * 1024

    async def recognize(self, image_bytes: bytes) -> FoodCandidate:
        """Return the recognized food, or raise RecognitionError."""
        if self.client is None:
            raise RecognitionError(MISSING_KEY_MESSAGE, reason="missing_credentials")
        if len(image_bytes) > self.max_image_bytes:
            limit_mb = self.max_image_bytes // (1024 * 1024)
            raise RecognitionError(
                f"Please upload an image smaller than {limit_mb}MB",
                reason="image_too_large",
            )

        content = await self.client.complete(
            model=self.model,
            prompt=RECOGNITION_PROMPT,
            image_data_url=_to_data_url(image_bytes),
        )
        candidate = decode_candidate(content)
        _logger.info(
            "Recognized food: name=%s calories=%s", candidate.name, candidate.calories
        )
        return candidate


def message_for_status(status_code: int | None) -> str:
    """Return the user-facing message for an HTTP error status."""
    if status_code is None:
        return DEFAULT_FAILURE_MESSAGE
    return _STATUS_MESSAGES.get(status_code, DEFAULT_FAILURE_MESSAGE)


def decode_candidate(content: str) -> FoodCandidate:
    """Decode a model reply into a complete candidate.

    Replies may wrap the JSON object in prose; the outermost brace span is
    used when the whole reply does not parse.
    """
    payload = _parse_json_object(content)
    missing = [key for key in REQUIRED_KEYS if not payload.get(key)]
    if missing:
        raise RecognitionError(
            DEFAULT_FAILURE_MESSAGE,
            reason=f"incomplete: missing {', '.join(missing)}",
        )
    try:
        fields = {key: payload[key] for key in REQUIRED_KEYS}
        return FoodCandidate.model_validate(fields)
    except ValidationError as exc:
        raise RecognitionError(DEFAULT_FAILURE_MESSAGE, reason="malformed") from exc


def _parse_json_object(content: str) -> dict[str, object]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError:
        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end < start:
            raise RecognitionError(
                DEFAULT_FAILURE_MESSAGE, reason="malformed: no JSON found"
            ) from None
        try:
            payload = json.loads(content[start : end + 1])
        except json.JSONDecodeError as exc:
            raise RecognitionError(DEFAULT_FAILURE_MESSAGE, reason="malformed") from exc
    if not isinstance(payload, dict):
        raise RecognitionError(
            DEFAULT_FAILURE_MESSAGE, reason="malformed: not an object"
        )
    return payload


def _to_data_url(image_bytes: bytes) -> str:
    """Encode a meal photo as a base64 data URL for the vision model."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Guess the photo format from its leading bytes, defaulting to JPEG."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"

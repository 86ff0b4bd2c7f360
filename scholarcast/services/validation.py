"""
Schema validation and normalization of extracted provider payloads.

Out-of-range numbers are clamped (recoverable); missing or wrongly typed
fields reject the payload (not recoverable).
"""

import logging
import math
from typing import Any, Optional

from scholarcast.models.cascade import GradingResult, IllustrationResult
from scholarcast.providers.base import ProviderOutput
from scholarcast.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100
GRADING_KEYS = ("score", "feedback")

ALLOWED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp", "image/svg+xml")
MIME_ALIASES = {"image/jpg": "image/jpeg"}


def clamp_score(value: float, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    """Round half-up and clamp into [low, high]."""
    return max(low, min(high, round_half_up(value)))


def validate_grading(payload: Any) -> Optional[GradingResult]:
    """Validate a `{score, feedback}` payload.

    Examples:
        >>> validate_grading({"score": 137, "feedback": "Great"}).score
        100
        >>> validate_grading({"score": 80}) is None
        True
    """
    if not isinstance(payload, dict):
        return None

    score = payload.get("score")
    # bool is an int subclass; true/false is not a score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        logger.debug(f"Rejecting grading payload: score is {type(score).__name__}")
        return None
    if not math.isfinite(score):
        return None

    feedback = payload.get("feedback")
    if not isinstance(feedback, str) or not feedback.strip():
        logger.debug("Rejecting grading payload: feedback missing or empty")
        return None

    return GradingResult(score=clamp_score(score), feedback=feedback.strip())


def normalize_mime_type(mime_type: Optional[str]) -> str:
    base = (mime_type or "").split(";", 1)[0].strip().lower()
    return MIME_ALIASES.get(base, base)


def validate_illustration(output: ProviderOutput, prompt_used: str) -> Optional[IllustrationResult]:
    """Accept non-empty image bytes of a storable mime type."""
    if not output.data:
        return None

    mime_type = normalize_mime_type(output.mime_type)
    if mime_type not in ALLOWED_MIME_TYPES:
        logger.debug(f"Rejecting {output.provider} image: unsupported mime type '{mime_type}'")
        return None

    return IllustrationResult(image_bytes=output.data, mime_type=mime_type, prompt_used=prompt_used)

"""
JSON repair for malformed LLM output.

LLMs sometimes emit trailing commas, unquoted keys, raw newlines inside
strings or wrap the object in an array. This module turns such text back
into a dict when possible.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from json_repair import repair_json

logger = logging.getLogger(__name__)


def repair_llm_json(
    raw_content: str,
    required_keys: Sequence[str] = (),
    provider: str = "unknown",
) -> Optional[Dict[str, Any]]:
    """
    Repair and parse potentially malformed JSON from LLM output.

    Uses json-repair library to fix common issues like:
    - Control characters in strings
    - Trailing commas
    - Missing quotes
    - Unescaped special characters

    Args:
        raw_content: Raw JSON string from LLM (may be malformed)
        required_keys: Keys a dict must contain to be returned
        provider: Provider name for logging purposes

    Returns:
        Parsed dict if successful, None if repair failed

    Examples:
        >>> repair_llm_json('{"score": 80, "feedback": "ok",}')  # trailing comma
        {'score': 80, 'feedback': 'ok'}
    """
    if not raw_content or not raw_content.strip():
        return None

    try:
        repaired = repair_json(raw_content, return_objects=True)
    except Exception as e:
        logger.warning(f"[{provider}] JSON repair failed: {e}")
        return None

    if isinstance(repaired, dict):
        return repaired if _has_keys(repaired, required_keys) else None

    # Handle list results - LLM might output array instead of object
    if isinstance(repaired, list):
        dicts_in_list = [item for item in repaired if isinstance(item, dict)]
        for d in dicts_in_list:
            if _has_keys(d, required_keys):
                logger.info(f"[{provider}] JSON repair: found dict with expected keys in array")
                return d

    # If repair_json returns a string, it means it couldn't parse
    logger.debug(f"[{provider}] JSON repair returned no usable object: {type(repaired).__name__}")
    return None


def _has_keys(obj: Dict[str, Any], keys: Sequence[str]) -> bool:
    return all(key in obj for key in keys)

"""
Structured payload extraction from free-form provider text.

Three strategies run in order and the first one yielding a JSON object with
every required key wins:

1. the whole text is JSON;
2. the inner text of a fenced code block (```json ... ```) is JSON;
3. the smallest balanced `{...}` substring mentioning every required key is JSON.

Strategies 2 and 3 fall back to json-repair for candidates that strict parsing
rejects. No match is a normal outcome and yields None.
"""

import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Sequence

import orjson

from scholarcast.utils.normalize import repair_llm_json

logger = logging.getLogger(__name__)

FENCED_BLOCK_RE = re.compile(r"```[\w+-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)


def _matches(data: Any, required_keys: Sequence[str]) -> bool:
    return isinstance(data, dict) and all(key in data for key in required_keys)


def _parse_candidate(
    candidate: str, required_keys: Sequence[str], provider: str
) -> Optional[Dict[str, Any]]:
    """Strict parse first, json-repair second."""
    try:
        data = orjson.loads(candidate)
    except orjson.JSONDecodeError:
        return repair_llm_json(candidate, required_keys, provider)
    return data if _matches(data, required_keys) else None


def parse_direct(
    text: str, required_keys: Sequence[str] = (), provider: str = "unknown"
) -> Optional[Dict[str, Any]]:
    """Strategy 1: the entire text is a JSON object."""
    try:
        data = orjson.loads(text.strip())
    except orjson.JSONDecodeError:
        return None
    return data if _matches(data, required_keys) else None


def parse_fenced(
    text: str, required_keys: Sequence[str] = (), provider: str = "unknown"
) -> Optional[Dict[str, Any]]:
    """Strategy 2: JSON inside a fenced code block."""
    for match in FENCED_BLOCK_RE.finditer(text):
        inner = match.group(1).strip()
        if not inner:
            continue
        payload = _parse_candidate(inner, required_keys, provider)
        if payload is not None:
            return payload
    return None


def _balanced_objects(text: str) -> Iterator[str]:
    """Yield every balanced {...} substring, string-literal aware."""
    for start, char in enumerate(text):
        if char != "{":
            continue
        depth = 0
        in_string = False
        escaped = False
        for end in range(start, len(text)):
            c = text[end]
            if in_string:
                if escaped:
                    escaped = False
                elif c == "\\":
                    escaped = True
                elif c == '"':
                    in_string = False
                continue
            if c == '"':
                in_string = True
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    yield text[start:end + 1]
                    break


def parse_embedded(
    text: str, required_keys: Sequence[str] = (), provider: str = "unknown"
) -> Optional[Dict[str, Any]]:
    """Strategy 3: smallest object-looking substring naming every required key."""
    candidates: List[str] = [
        candidate
        for candidate in _balanced_objects(text)
        if all(key in candidate for key in required_keys)
    ]
    # sorted() is stable, so equal lengths keep their position order
    for candidate in sorted(candidates, key=len):
        payload = _parse_candidate(candidate, required_keys, provider)
        if payload is not None:
            return payload
    return None


EXTRACTION_STRATEGIES = (parse_direct, parse_fenced, parse_embedded)


def extract_payload(
    text: str,
    required_keys: Sequence[str] = (),
    provider: str = "unknown",
) -> Optional[Dict[str, Any]]:
    """Recover a structured payload from provider text, or None."""
    if not text or not text.strip():
        return None

    for strategy in EXTRACTION_STRATEGIES:
        payload = strategy(text, required_keys, provider)
        if payload is not None:
            if strategy is not parse_direct:
                logger.debug(f"[{provider}] payload recovered via {strategy.__name__}")
            return payload

    logger.info(f"[{provider}] no structured payload with keys {list(required_keys)}")
    return None

"""
Variant resolution and request checksums for illustration generation.
"""

import hashlib
from typing import Any, Dict, List, Optional, Sequence

import orjson

# Diagrams are not meaningfully re-renderable in arbitrary art styles
SINGLE_VARIANT_STYLES = {"diagram": "photorealistic"}
DEFAULT_VARIANTS = ("photorealistic", "anime")


def resolve_variants(style: str, requested: Optional[Sequence[str]] = None) -> List[str]:
    """Resolve the visual styles to generate for one logical request.

    Examples:
        >>> resolve_variants("diagram", ["anime", "comic"])
        ['photorealistic']
        >>> resolve_variants("textbook", ["comic", "comic", "anime"])
        ['comic', 'anime']
    """
    only = SINGLE_VARIANT_STYLES.get(style)
    base = [only] if only else list(DEFAULT_VARIANTS)
    if not requested:
        return base

    filtered = [variant for variant in requested if only is None or variant == only]
    return list(dict.fromkeys(filtered or base))


def checksum_projection(
    module_id: Optional[str],
    content: str,
    locale: str,
    style: str,
    visual_style: str,
    slot_id: Optional[str] = None,
    anchor: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Normalized identity fields of an illustration request."""
    return {
        "module_id": module_id,
        "content": content.strip(),
        "locale": locale.lower(),
        "style": style.lower(),
        "visual_style": visual_style.lower(),
        "slot_id": str(slot_id) if slot_id is not None else None,
        "anchor": anchor,
    }


def compute_checksum(
    module_id: Optional[str],
    content: str,
    locale: str,
    style: str,
    visual_style: str,
    slot_id: Optional[str] = None,
    anchor: Optional[Dict[str, Any]] = None,
) -> str:
    """SHA-256 over the key-sorted JSON projection of the request identity.

    Identity only: provider and model are not part of it, so a cached image
    from any provider satisfies an identical request.
    """
    projection = checksum_projection(
        module_id, content, locale, style, visual_style, slot_id, anchor
    )
    encoded = orjson.dumps(projection, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS)
    return hashlib.sha256(encoded).hexdigest()

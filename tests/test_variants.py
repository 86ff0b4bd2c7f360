"""Tests for variant resolution and request checksums."""

import pytest

from scholarcast.services.variants import (
    DEFAULT_VARIANTS,
    checksum_projection,
    compute_checksum,
    resolve_variants,
)

IDENTITY = dict(
    module_id="mod-1",
    content="Cells divide through mitosis.",
    locale="en",
    style="textbook",
    visual_style="anime",
    slot_id="2f1b6c1e-8a49-4c1f-9a0e-7d3b0f6f4c11",
    anchor={"section": 2, "paragraph": 4},
)


def test_diagram_ignores_requested_art_styles():
    assert resolve_variants("diagram", ["anime", "comic"]) == ["photorealistic"]


def test_diagram_default():
    assert resolve_variants("diagram") == ["photorealistic"]


def test_default_variants():
    assert resolve_variants("textbook") == list(DEFAULT_VARIANTS)
    assert resolve_variants("header", []) == list(DEFAULT_VARIANTS)


def test_requested_variants_are_deduplicated_in_order():
    assert resolve_variants("conceptual", ["comic", "watercolor", "comic"]) == ["comic", "watercolor"]


def test_diagram_keeps_photorealistic_when_requested():
    assert resolve_variants("diagram", ["anime", "photorealistic"]) == ["photorealistic"]


def test_checksum_is_hex_sha256():
    checksum = compute_checksum(**IDENTITY)
    assert len(checksum) == 64
    int(checksum, 16)


def test_checksum_ignores_key_order():
    reordered = dict(reversed(list(IDENTITY.items())))
    reordered["anchor"] = {"paragraph": 4, "section": 2}
    assert compute_checksum(**reordered) == compute_checksum(**IDENTITY)


def test_checksum_normalizes_case_and_whitespace():
    variant = dict(IDENTITY, content="  Cells divide through mitosis.\n", locale="EN", style="Textbook")
    assert compute_checksum(**variant) == compute_checksum(**IDENTITY)


@pytest.mark.parametrize(
    "field, value",
    [
        ("module_id", "mod-2"),
        ("content", "Cells divide through meiosis."),
        ("locale", "es"),
        ("style", "header"),
        ("visual_style", "comic"),
        ("slot_id", None),
        ("anchor", {"section": 3, "paragraph": 4}),
    ],
)
def test_checksum_changes_with_identity_fields(field, value):
    changed = dict(IDENTITY, **{field: value})
    assert compute_checksum(**changed) != compute_checksum(**IDENTITY)


def test_projection_has_no_provider_identity():
    projection = checksum_projection(**IDENTITY)
    assert "provider" not in projection
    assert "model" not in projection

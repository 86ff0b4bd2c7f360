"""Tests for payload validation and normalization."""

import pytest

from scholarcast.providers.base import ProviderOutput
from scholarcast.services.validation import (
    normalize_mime_type,
    validate_grading,
    validate_illustration,
)


def test_score_above_range_is_clamped():
    result = validate_grading({"score": 137, "feedback": "Great"})
    assert result.score == 100


def test_score_below_range_is_clamped():
    result = validate_grading({"score": -5, "feedback": "Off topic"})
    assert result.score == 0


def test_fractional_score_rounds_half_up():
    assert validate_grading({"score": 72.5, "feedback": "Good"}).score == 73


def test_missing_feedback_is_rejected():
    assert validate_grading({"score": 80}) is None


def test_blank_feedback_is_rejected():
    assert validate_grading({"score": 80, "feedback": "   "}) is None


def test_feedback_is_stripped():
    assert validate_grading({"score": 80, "feedback": "  Nice.\n"}).feedback == "Nice."


@pytest.mark.parametrize("score", ["80", None, True, float("nan"), float("inf"), [80]])
def test_non_numeric_score_is_rejected(score):
    assert validate_grading({"score": score, "feedback": "ok"}) is None


def test_non_dict_payload_is_rejected():
    assert validate_grading(["score", "feedback"]) is None
    assert validate_grading(None) is None


def test_normalize_mime_type():
    assert normalize_mime_type("image/JPG") == "image/jpeg"
    assert normalize_mime_type("image/png; charset=binary") == "image/png"
    assert normalize_mime_type(None) == ""


def test_validate_illustration_accepts_png():
    output = ProviderOutput(provider="runware", model="m", data=b"\x89PNG", mime_type="image/png")
    result = validate_illustration(output, "a prompt")
    assert result.image_bytes == b"\x89PNG"
    assert result.mime_type == "image/png"
    assert result.prompt_used == "a prompt"


def test_validate_illustration_rejects_empty_bytes():
    output = ProviderOutput(provider="runware", model="m", data=b"", mime_type="image/png")
    assert validate_illustration(output, "a prompt") is None


def test_validate_illustration_rejects_unsupported_mime():
    output = ProviderOutput(provider="qwen", model="m", data=b"<html>", mime_type="text/html")
    assert validate_illustration(output, "a prompt") is None

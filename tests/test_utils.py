"""Tests for the small shared utilities."""

import time
from datetime import timedelta

from scholarcast.utils.normalize import repair_llm_json
from scholarcast.utils.numbers import round_half_up
from scholarcast.utils.time import elapsed_ms, utcnow


def test_repair_trailing_comma():
    assert repair_llm_json('{"score": 80, "feedback": "ok",}') == {"score": 80, "feedback": "ok"}


def test_repair_required_keys_missing():
    assert repair_llm_json('{"score": 80,}', required_keys=("score", "feedback")) is None


def test_repair_dict_inside_array():
    raw = '[{"note": "x"}, {"score": 50, "feedback": "meh"}]'
    assert repair_llm_json(raw, required_keys=("score", "feedback")) == {"score": 50, "feedback": "meh"}


def test_repair_empty_input():
    assert repair_llm_json("") is None
    assert repair_llm_json("   ") is None


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(85.5) == 86
    assert round_half_up(72.4) == 72
    assert round_half_up(-0.5) == 0


def test_elapsed_ms():
    started = time.monotonic() - 0.25
    assert 250 <= elapsed_ms(started) < 5000


def test_utcnow_is_timezone_aware():
    assert utcnow().utcoffset() == timedelta(0)

"""
Provider-free grading used when every text provider failed.

The score is a pure function of the answer and the module content. It never
leaves the [30, 85] band: without a model judgment we neither fail nor
fully credit an answer.
"""

import re
from typing import List, Set

from scholarcast.models.cascade import GradingResult
from scholarcast.utils.numbers import round_half_up

HEURISTIC_PROVIDER = "heuristic"

BASE_SCORE = 40
# (minimum length exclusive, bonus), checked top-down
LENGTH_BONUSES = ((200, 20), (100, 10), (50, 5))
OVERLAP_WEIGHT = 30
OVERLAP_CAP = 30
MIN_KEYWORD_LENGTH = 4
SCORE_FLOOR = 30
SCORE_CEILING = 85

HIGH_TIER = 70
MEDIUM_TIER = 50

FEEDBACK_HIGH = (
    "Your answer shows a good understanding of the module. It covers several of the "
    "key ideas; keep connecting them with concrete examples."
)
FEEDBACK_MEDIUM = (
    "Your answer shows a partial understanding of the module. Review the main concepts "
    "and try to explain them in more detail using the module's terminology."
)
FEEDBACK_LOW = (
    "Your answer needs review. Revisit the module content and try again, focusing on "
    "its key concepts and explaining them in your own words."
)

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def _words(text: str) -> List[str]:
    return _WORD_RE.findall(text.lower())


def keywords(text: str) -> List[str]:
    """Answer tokens long enough to carry meaning (more than 3 characters)."""
    return [w for w in _words(text) if len(w) >= MIN_KEYWORD_LENGTH]


def length_bonus(answer: str) -> int:
    length = len(answer.strip())
    for threshold, bonus in LENGTH_BONUSES:
        if length > threshold:
            return bonus
    return 0


def overlap_ratio(answer: str, content: str) -> float:
    """Fraction of the answer's keywords that also appear in the content."""
    answer_keywords = keywords(answer)
    if not answer_keywords:
        return 0.0
    vocabulary: Set[str] = set(_words(content))
    matched = sum(1 for word in answer_keywords if word in vocabulary)
    return matched / len(answer_keywords)


def feedback_for(score: int) -> str:
    if score >= HIGH_TIER:
        return FEEDBACK_HIGH
    if score >= MEDIUM_TIER:
        return FEEDBACK_MEDIUM
    return FEEDBACK_LOW


def heuristic_grade(answer: str, content: str) -> GradingResult:
    """Deterministic grade for `answer` against the reference `content`."""
    overlap_bonus = min(OVERLAP_CAP, round_half_up(overlap_ratio(answer, content) * OVERLAP_WEIGHT))
    raw = BASE_SCORE + length_bonus(answer) + overlap_bonus
    score = max(SCORE_FLOOR, min(SCORE_CEILING, raw))
    return GradingResult(score=score, feedback=feedback_for(score))

"""
Quiz answer grading.

Each answer runs its own text-provider cascade. An answer whose cascade
produces nothing (or that has no provider to run) is graded by the heuristic
fallback instead, so grading always returns a score.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from scholarcast.models.cascade import Attempt, FailureReason, GradingResult
from scholarcast.models.request import GradingRequest, QuizAnswer
from scholarcast.providers.base import BaseProvider, ProviderOutput, TextPrompt
from scholarcast.services.cascade import run_cascade
from scholarcast.services.extraction import extract_payload
from scholarcast.services.heuristic import HEURISTIC_PROVIDER, heuristic_grade
from scholarcast.services.prompts import GRADING_SYSTEM_PROMPT, build_grading_prompt
from scholarcast.services.validation import GRADING_KEYS, validate_grading
from scholarcast.utils.numbers import round_half_up
from scholarcast.utils.time import elapsed_ms

logger = logging.getLogger(__name__)

# XP awarded per score point
XP_PER_POINT = 0.5


@dataclass
class GradedAnswer:
    index: int  # 1-based, as shown to the student
    result: GradingResult
    provider: str  # Provider name, or "heuristic"
    model: Optional[str] = None
    attempts: List[Attempt] = field(default_factory=list)
    fallback_reason: Optional[FailureReason] = None


@dataclass
class GradingOutcome:
    score: int
    feedback: str
    xp_awarded: int
    items: List[GradedAnswer]
    duration_ms: int = 0

    @property
    def providers(self) -> List[str]:
        return [item.provider for item in self.items]


def interpret_grading(output: ProviderOutput) -> Optional[GradingResult]:
    """Extractor + validator for text provider output."""
    payload = extract_payload(output.text, GRADING_KEYS, output.provider)
    return validate_grading(payload)


def combine_feedback(items: Sequence[GradedAnswer]) -> str:
    if len(items) == 1:
        return items[0].result.feedback
    return "\n\n".join(f"Question {item.index}: {item.result.feedback}" for item in items)


def xp_for_score(score: int) -> int:
    return round_half_up(score * XP_PER_POINT)


class GradingService:
    """Grades every answer of a request through the text-provider cascade."""

    def __init__(self, providers: Sequence[BaseProvider], timeout: Optional[float] = None):
        self.providers = list(providers)
        self.timeout = timeout

    async def grade_answer(self, index: int, item: QuizAnswer, module_content: str) -> GradedAnswer:
        if not self.providers:
            logger.warning(f"No text providers configured; heuristic grading for question {index}")
            return GradedAnswer(
                index=index,
                result=heuristic_grade(item.student_answer, module_content),
                provider=HEURISTIC_PROVIDER,
                fallback_reason=FailureReason.CONFIGURATION_ERROR,
            )

        prompt = TextPrompt(
            prompt=build_grading_prompt(item, module_content),
            system_prompt=GRADING_SYSTEM_PROMPT,
            json_mode=True,
        )
        outcome = await run_cascade(self.providers, prompt, interpret_grading, timeout=self.timeout)

        if outcome.result is None:
            logger.warning(f"All text providers failed for question {index}; using heuristic")
            return GradedAnswer(
                index=index,
                result=heuristic_grade(item.student_answer, module_content),
                provider=HEURISTIC_PROVIDER,
                attempts=outcome.attempts,
                fallback_reason=FailureReason.EXHAUSTED,
            )

        return GradedAnswer(
            index=index,
            result=outcome.result,
            provider=outcome.provider_used,
            model=outcome.model_used,
            attempts=outcome.attempts,
        )

    async def grade(self, request: GradingRequest) -> GradingOutcome:
        """Grade all answers sequentially, in input order."""
        started = time.monotonic()
        items: List[GradedAnswer] = []
        for index, item in enumerate(request.items, start=1):
            items.append(await self.grade_answer(index, item, request.module_content))

        score = round_half_up(sum(i.result.score for i in items) / len(items))
        duration_ms = elapsed_ms(started)
        logger.info(
            f"Graded {len(items)} answer(s): score={score}, providers={[i.provider for i in items]}, "
            f"duration={duration_ms}ms"
        )
        return GradingOutcome(
            score=score,
            feedback=combine_feedback(items),
            xp_awarded=xp_for_score(score),
            items=items,
            duration_ms=duration_ms,
        )

"""
Quiz grading route.

Answers are graded by the text-provider cascade; when every provider fails
the heuristic grader is used, so a well-formed request always gets a score.
"""

import logging

from fastapi import APIRouter, Depends

from scholarcast.models.request import GradingRequest
from scholarcast.models.response import GradedItem, GradingDebug, GradingResponse
from scholarcast.providers.registry import ProviderRegistry, get_provider_registry
from scholarcast.services.grading import GradingOutcome, GradingService
from scholarcast.utils.exceptions import raise_internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


def to_response(outcome: GradingOutcome) -> GradingResponse:
    return GradingResponse(
        score=outcome.score,
        feedback=outcome.feedback,
        xp_awarded=outcome.xp_awarded,
        debug=GradingDebug(
            providers=outcome.providers,
            questions_graded=len(outcome.items),
            duration=outcome.duration_ms,
            cascade=[
                GradedItem(
                    index=item.index,
                    provider=item.provider,
                    score=item.result.score,
                    attempts=[a.model_dump(mode="json", exclude_none=True) for a in item.attempts],
                )
                for item in outcome.items
            ],
        ),
    )


@router.post("/quiz/grade", response_model=GradingResponse, response_model_by_alias=True)
async def grade_quiz(
    request: GradingRequest,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    """
    POST /api/quiz/grade - Grade one or more quiz answers

    Accepts either `answers` or a single `studentAnswer` (+ `questionText`).
    """
    service = GradingService(registry.text_providers(), timeout=registry.provider_timeout)
    try:
        outcome = await service.grade(request)
    except Exception:
        logger.exception("[Grading] Unexpected error while grading")
        raise_internal_error("Grading failed")

    return to_response(outcome)

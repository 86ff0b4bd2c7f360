"""Tests for the quiz grading aggregator."""

import pytest

from fakes import ScriptedProvider
from scholarcast.models.cascade import FailureReason
from scholarcast.models.request import GradingRequest, QuizAnswer
from scholarcast.providers.base import ProviderError
from scholarcast.services.grading import GradingService, xp_for_score
from scholarcast.services.heuristic import FEEDBACK_HIGH, HEURISTIC_PROVIDER

CONTENT = "Photosynthesis uses chlorophyll to turn light into glucose and oxygen."


def long_answer() -> str:
    words = "photosynthesis chlorophyll glucose oxygen bicycle mountain umbrella keyboard volcano triangle"
    return (words + " " + "so " * 100)[:250]


@pytest.mark.asyncio
async def test_no_providers_uses_heuristic():
    request = GradingRequest(module_content=CONTENT, student_answer=long_answer())

    outcome = await GradingService([]).grade(request)

    assert outcome.score == 72
    assert outcome.feedback == FEEDBACK_HIGH
    assert outcome.xp_awarded == 36
    assert outcome.providers == [HEURISTIC_PROVIDER]
    assert outcome.items[0].fallback_reason == FailureReason.CONFIGURATION_ERROR
    assert outcome.items[0].attempts == []


@pytest.mark.asyncio
async def test_single_answer_graded_by_provider():
    provider = ScriptedProvider("groq", outputs=['{"score": 93, "feedback": "Great"}'])
    request = GradingRequest(
        module_content=CONTENT,
        question_text="What does photosynthesis produce?",
        student_answer="Glucose and oxygen.",
    )

    outcome = await GradingService([provider]).grade(request)

    assert outcome.score == 93
    assert outcome.feedback == "Great"
    assert outcome.xp_awarded == 47
    assert outcome.providers == ["groq"]
    prompt = provider.prompts[0]
    assert "What does photosynthesis produce?" in prompt.prompt
    assert "Glucose and oxygen." in prompt.prompt
    assert prompt.system_prompt


@pytest.mark.asyncio
async def test_multiple_answers_are_averaged_in_order():
    provider = ScriptedProvider(
        "groq",
        outputs=['{"score": 80, "feedback": "Good"}', '```json\n{"score": 91, "feedback": "Very good"}\n```'],
    )
    request = GradingRequest(
        module_content=CONTENT,
        answers=[
            QuizAnswer(question_text="Q1", student_answer="first"),
            QuizAnswer(question_text="Q2", student_answer="second"),
        ],
    )

    outcome = await GradingService([provider]).grade(request)

    assert [item.result.score for item in outcome.items] == [80, 91]
    assert outcome.score == 86  # mean 85.5 rounds half up
    assert outcome.feedback == "Question 1: Good\n\nQuestion 2: Very good"
    assert "first" in provider.prompts[0].prompt
    assert "second" in provider.prompts[1].prompt


@pytest.mark.asyncio
async def test_exhausted_item_falls_back_to_heuristic():
    providers = [
        ScriptedProvider("groq", error=ProviderError("groq", "HTTP 500")),
        ScriptedProvider("gemini", outputs=["not json"]),
    ]
    request = GradingRequest(module_content=CONTENT, student_answer=long_answer())

    outcome = await GradingService(providers, timeout=1).grade(request)

    item = outcome.items[0]
    assert item.provider == HEURISTIC_PROVIDER
    assert item.fallback_reason == FailureReason.EXHAUSTED
    assert [a.failure_reason for a in item.attempts] == [
        FailureReason.TRANSPORT_ERROR,
        FailureReason.INVALID_RESPONSE,
    ]
    assert outcome.score == 72


@pytest.mark.asyncio
async def test_mixed_provider_and_heuristic_items():
    provider = ScriptedProvider("groq", outputs=['{"score": 100, "feedback": "Perfect"}', "oops"])
    request = GradingRequest(
        module_content=CONTENT,
        answers=[
            QuizAnswer(student_answer="Glucose and oxygen"),
            QuizAnswer(student_answer="no idea"),
        ],
    )

    outcome = await GradingService([provider]).grade(request)

    assert outcome.providers == ["groq", HEURISTIC_PROVIDER]
    assert outcome.score == 70  # (100 + 40) / 2


def test_grading_request_requires_an_answer():
    with pytest.raises(ValueError):
        GradingRequest(module_content=CONTENT)


def test_xp_for_score():
    assert xp_for_score(0) == 0
    assert xp_for_score(71) == 36
    assert xp_for_score(100) == 50

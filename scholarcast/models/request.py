from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional


Locale = Literal["en", "es"]
IllustrationStyle = Literal["schema", "infographic", "conceptual", "textbook", "header", "diagram"]
VisualStyle = Literal["photorealistic", "anime", "comic", "pixel-art", "watercolor"]
ImageProviderName = Literal["runware", "huggingface", "qwen", "gemini"]


class QuizAnswer(BaseModel):
    """A single graded item: the student's answer and the question it responds to"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    question_text: Optional[str] = Field(default=None, max_length=4000)
    student_answer: str = Field(..., min_length=1, max_length=20000)


class GradingRequest(BaseModel):
    """Grade one or more quiz answers against the module content.

    Either `answers` or the single `student_answer` (+ optional `question_text`)
    must be provided.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        json_schema_extra={
            "examples": [
                {
                    "moduleContent": "Photosynthesis converts light energy into chemical energy...",
                    "answers": [
                        {
                            "questionText": "What does photosynthesis produce?",
                            "studentAnswer": "Glucose and oxygen from carbon dioxide and water.",
                        }
                    ],
                }
            ]
        },
    )

    module_content: str = Field(..., min_length=1, max_length=100000)
    question_text: Optional[str] = Field(default=None, max_length=4000)
    student_answer: Optional[str] = Field(default=None, max_length=20000)
    answers: List[QuizAnswer] = Field(default_factory=list, max_length=50)

    @model_validator(mode="after")
    def _require_answer(self) -> "GradingRequest":
        if not self.answers and not (self.student_answer and self.student_answer.strip()):
            raise ValueError("At least one student answer is required")
        return self

    @property
    def items(self) -> List[QuizAnswer]:
        """Answers to grade, in input order."""
        if self.answers:
            return list(self.answers)
        return [QuizAnswer(question_text=self.question_text, student_answer=self.student_answer)]


class IllustrationRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    content: str = Field(..., min_length=10)
    locale: Locale = "en"
    style: IllustrationStyle = "textbook"
    visual_style: VisualStyle = "photorealistic"
    module_id: Optional[str] = None
    slot_id: Optional[UUID] = None
    anchor: Optional[Dict[str, Any]] = None
    checksum: Optional[str] = None  # Caller-computed checksum wins over ours
    prompt_override: Optional[str] = Field(default=None, min_length=10, max_length=4000)
    negative_prompt_override: Optional[str] = Field(default=None, max_length=2000)
    variants: Optional[List[VisualStyle]] = Field(default=None, min_length=1, max_length=10)
    metadata: Optional[Dict[str, Any]] = None
    provider_order: Optional[List[ImageProviderName]] = None

"""
Cascade models shared by grading and illustration generation.

An Attempt is recorded for every provider tried, in order, and is kept even
when a later provider succeeds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field


class FailureReason(str, Enum):
    """Why a provider attempt (or a whole cascade) produced no result"""
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    INVALID_RESPONSE = "invalid_response"
    EXHAUSTED = "exhausted"
    CONFIGURATION_ERROR = "configuration_error"


class Attempt(BaseModel):
    """Outcome of trying a single provider within one cascade invocation"""
    provider: str
    succeeded: bool
    failure_reason: Optional[FailureReason] = None
    error: Optional[str] = None  # Provider error message for debugging
    model: Optional[str] = None
    duration_ms: int = 0


class GradingResult(BaseModel):
    """Validated grading judgment"""
    score: int = Field(ge=0, le=100)
    feedback: str = Field(min_length=1)


class IllustrationResult(BaseModel):
    """Validated generated image"""
    image_bytes: bytes
    mime_type: str
    prompt_used: str


T = TypeVar("T")


@dataclass
class CascadeOutcome(Generic[T]):
    result: Optional[T] = None
    provider_used: Optional[str] = None
    model_used: Optional[str] = None
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    def attempts_dump(self) -> List[dict]:
        return [a.model_dump(mode="json", exclude_none=True) for a in self.attempts]

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class GradedItem(_CamelModel):
    """Per-question grading trace for the debug block"""
    index: int
    provider: str  # Provider name, or "heuristic"
    score: int
    attempts: List[Dict[str, Any]] = Field(default_factory=list)


class GradingDebug(_CamelModel):
    providers: List[str]
    questions_graded: int
    duration: int  # milliseconds
    cascade: List[GradedItem]


class GradingResponse(_CamelModel):
    success: bool = True
    score: int
    feedback: str
    xp_awarded: int
    debug: GradingDebug


class VariantResponse(_CamelModel):
    visual_style: str
    url: Optional[str] = None
    mime_type: str
    model: Optional[str] = None
    provider: Optional[str] = None
    checksum: str
    persisted: Optional[Dict[str, Any]] = None
    attempts: List[Dict[str, Any]] = Field(default_factory=list)


class IllustrationResponse(_CamelModel):
    success: Literal[True] = True
    provider: str
    model: Optional[str] = None
    primary: VariantResponse
    variants: List[VariantResponse]


class NoIllustrationResponse(_CamelModel):
    """Every variant failed on every provider; not a transport failure"""
    success: Literal[False] = False
    code: Literal["NO_ILLUSTRATION_GENERATED"] = "NO_ILLUSTRATION_GENERATED"
    error: str
    attempts: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)

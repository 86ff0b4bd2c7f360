"""
Illustration generation.

One logical request expands into one or more visual-style variants; each
variant runs its own image-provider cascade. A request succeeds when at least
one variant does.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scholarcast.models.cascade import Attempt, FailureReason, IllustrationResult
from scholarcast.models.request import IllustrationRequest
from scholarcast.providers.base import ImagePrompt, ProviderOutput
from scholarcast.providers.registry import ProviderRegistry
from scholarcast.services.cascade import run_cascade
from scholarcast.services.prompts import build_illustration_prompt, resolve_negative_prompt
from scholarcast.services.storage import IllustrationStore, PersistedIllustration
from scholarcast.services.validation import validate_illustration
from scholarcast.services.variants import compute_checksum, resolve_variants

logger = logging.getLogger(__name__)

# (width, height, aspect ratio); kept modest to limit storage and cost
STYLE_DIMENSIONS = {
    "header": (1280, 720, "16:9"),
    "diagram": (1200, 900, "4:3"),
    "schema": (1200, 900, "4:3"),
    "infographic": (1024, 683, "3:2"),
}
DEFAULT_DIMENSIONS = (1024, 576, "16:9")


@dataclass
class VariantOutcome:
    visual_style: str
    checksum: str
    result: Optional[IllustrationResult] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    attempts: List[Attempt] = field(default_factory=list)
    failure_reason: Optional[FailureReason] = None
    persisted: Optional[PersistedIllustration] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    def attempts_dump(self) -> List[dict]:
        return [a.model_dump(mode="json", exclude_none=True) for a in self.attempts]


@dataclass
class IllustrationOutcome:
    requested_visual_style: str
    variants: List[VariantOutcome] = field(default_factory=list)

    @property
    def successful(self) -> List[VariantOutcome]:
        return [v for v in self.variants if v.succeeded]

    @property
    def succeeded(self) -> bool:
        return bool(self.successful)

    @property
    def primary(self) -> Optional[VariantOutcome]:
        """The variant matching the requested visual style, else the first success."""
        successful = self.successful
        for variant in successful:
            if variant.visual_style == self.requested_visual_style:
                return variant
        return successful[0] if successful else None

    @property
    def error(self) -> str:
        messages = []
        for variant in self.variants:
            if variant.succeeded:
                continue
            reason = variant.failure_reason.value if variant.failure_reason else "unknown"
            message = f"variant {variant.visual_style}: {reason}"
            last_error = variant.attempts[-1].error if variant.attempts else None
            if last_error:
                message += f" ({last_error})"
            messages.append(message)
        return " | ".join(messages) or "Image generation failed"

    def attempts_by_variant(self) -> Dict[str, List[dict]]:
        return {v.visual_style: v.attempts_dump() for v in self.variants}


def resolve_dimensions(style: str) -> tuple:
    return STYLE_DIMENSIONS.get(style, DEFAULT_DIMENSIONS)


def build_image_prompt(request: IllustrationRequest, visual_style: str) -> ImagePrompt:
    """Image prompt for one variant; a caller prompt override applies to all variants."""
    if request.prompt_override:
        text = request.prompt_override.strip()
    else:
        text = build_illustration_prompt(
            request.content, request.locale, request.style, visual_style
        )
    width, height, aspect_ratio = resolve_dimensions(request.style)
    return ImagePrompt(
        prompt=text,
        negative_prompt=resolve_negative_prompt(request.negative_prompt_override),
        width=width,
        height=height,
        aspect_ratio=aspect_ratio,
    )


class IllustrationService:
    """Generates and optionally persists the variants of an illustration request."""

    def __init__(
        self,
        registry: ProviderRegistry,
        store: Optional[IllustrationStore] = None,
        timeout: Optional[float] = None,
    ):
        self.registry = registry
        self.store = store
        self.timeout = timeout

    def _checksum(self, request: IllustrationRequest, visual_style: str) -> str:
        if request.checksum:
            return request.checksum
        return compute_checksum(
            request.module_id,
            request.content,
            request.locale,
            request.style,
            visual_style,
            slot_id=str(request.slot_id) if request.slot_id else None,
            anchor=request.anchor,
        )

    async def generate_variant(self, request: IllustrationRequest, visual_style: str) -> VariantOutcome:
        variant = VariantOutcome(
            visual_style=visual_style,
            checksum=self._checksum(request, visual_style),
        )

        providers = self.registry.image_providers(request.style, request.provider_order)
        if not providers:
            logger.warning(
                f"[Illustrations] No image providers configured for style={request.style}"
            )
            variant.failure_reason = FailureReason.CONFIGURATION_ERROR
            return variant

        prompt = build_image_prompt(request, visual_style)

        def interpret(output: ProviderOutput) -> Optional[IllustrationResult]:
            return validate_illustration(output, prompt.prompt)

        outcome = await run_cascade(providers, prompt, interpret, timeout=self.timeout)
        variant.attempts = outcome.attempts
        if outcome.result is None:
            variant.failure_reason = FailureReason.EXHAUSTED
            return variant

        variant.result = outcome.result
        variant.provider = outcome.provider_used
        variant.model = outcome.model_used

        if request.module_id and self.store is not None:
            variant.persisted = await self.store.persist(
                module_id=request.module_id,
                locale=request.locale,
                style=request.style,
                visual_style=visual_style,
                result=outcome.result,
                provider=outcome.provider_used,
                model=outcome.model_used,
                checksum=variant.checksum,
                slot_id=str(request.slot_id) if request.slot_id else None,
                anchor=request.anchor,
                metadata=self._metadata(request, visual_style, variant),
            )
        return variant

    @staticmethod
    def _metadata(request: IllustrationRequest, visual_style: str, variant: VariantOutcome) -> Dict[str, Any]:
        return {
            **(request.metadata or {}),
            "cascade_attempts": variant.attempts_dump(),
            "locale": request.locale,
            "style": request.style,
            "visual_style": visual_style,
        }

    async def generate(self, request: IllustrationRequest) -> IllustrationOutcome:
        """Run one cascade per resolved variant, sequentially."""
        variants = resolve_variants(request.style, request.variants)
        logger.info(
            f"[Illustrations] Generating {request.style} with variants: {', '.join(variants)}"
        )

        outcome = IllustrationOutcome(requested_visual_style=request.visual_style)
        for visual_style in variants:
            outcome.variants.append(await self.generate_variant(request, visual_style))

        if not outcome.succeeded:
            logger.warning(f"[Illustrations] No illustration generated: {outcome.error}")
        return outcome

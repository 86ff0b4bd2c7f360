"""
Illustration routes.

POST /api/courses/modules/generate-illustration generates every requested
visual-style variant; GET /api/illustrations/{id} serves a stored image.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from scholarcast.database import get_session
from scholarcast.models.request import IllustrationRequest
from scholarcast.models.response import (
    IllustrationResponse,
    NoIllustrationResponse,
    VariantResponse,
)
from scholarcast.providers.registry import ProviderRegistry, get_provider_registry
from scholarcast.services.illustration import (
    IllustrationOutcome,
    IllustrationService,
    VariantOutcome,
)
from scholarcast.services.storage import IllustrationStore
from scholarcast.utils.exceptions import (
    raise_bad_request,
    raise_internal_error,
    raise_not_found,
)

logger = logging.getLogger(__name__)

router = APIRouter()

IMAGE_CACHE_CONTROL = "public, max-age=86400"


async def get_illustration_store(
    session: AsyncSession = Depends(get_session),
) -> IllustrationStore:
    return IllustrationStore(session)


def variant_response(variant: VariantOutcome) -> VariantResponse:
    persisted = variant.persisted
    return VariantResponse(
        visual_style=variant.visual_style,
        url=persisted.image_url if persisted else None,
        mime_type=variant.result.mime_type,
        model=variant.model,
        provider=variant.provider,
        checksum=variant.checksum,
        persisted=persisted.to_dict() if persisted else None,
        attempts=variant.attempts_dump(),
    )


def to_response(outcome: IllustrationOutcome) -> Union[IllustrationResponse, NoIllustrationResponse]:
    if not outcome.succeeded:
        return NoIllustrationResponse(
            error=outcome.error,
            attempts=outcome.attempts_by_variant(),
        )

    primary = outcome.primary
    return IllustrationResponse(
        provider=primary.provider,
        model=primary.model,
        primary=variant_response(primary),
        variants=[variant_response(v) for v in outcome.successful],
    )


@router.post(
    "/courses/modules/generate-illustration",
    response_model=Union[IllustrationResponse, NoIllustrationResponse],
    response_model_by_alias=True,
)
async def generate_illustration(
    request: IllustrationRequest,
    registry: ProviderRegistry = Depends(get_provider_registry),
    store: IllustrationStore = Depends(get_illustration_store),
):
    """
    POST /api/courses/modules/generate-illustration

    Exhaustion is not a transport failure: it is answered with HTTP 200 and
    `{success: false, code: "NO_ILLUSTRATION_GENERATED"}`.
    """
    service = IllustrationService(registry, store=store, timeout=registry.provider_timeout)
    try:
        outcome = await service.generate(request)
    except Exception:
        logger.exception("[Illustrations] Unexpected error while generating illustration")
        raise_internal_error("Illustration generation failed")

    return to_response(outcome)


@router.get("/illustrations/{illustration_id}")
async def get_illustration(
    illustration_id: int,
    store: IllustrationStore = Depends(get_illustration_store),
):
    """GET /api/illustrations/{id} - Raw image bytes of a stored illustration"""
    if illustration_id < 1:
        raise_bad_request("Illustration id must be positive")

    record = await store.get(illustration_id)
    if record is None:
        raise_not_found("Illustration", illustration_id)

    return Response(
        content=record.image_data,
        media_type=record.mime_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )

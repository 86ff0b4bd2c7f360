from fastapi import APIRouter, Depends

from scholarcast.providers.registry import ProviderRegistry, get_provider_registry


router = APIRouter()


@router.get("/health")
async def health(registry: ProviderRegistry = Depends(get_provider_registry)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "providers": {
            "text": registry.get_provider_names("text"),
            "image": registry.get_provider_names("image"),
        },
    }

from scholarcast.providers.base import (
    BaseProvider,
    ImagePrompt,
    ProviderError,
    ProviderOutput,
    ProviderResponseError,
    TextPrompt,
)
from scholarcast.providers.registry import ProviderRegistry, provider_registry

__all__ = [
    "BaseProvider",
    "ImagePrompt",
    "ProviderError",
    "ProviderOutput",
    "ProviderResponseError",
    "ProviderRegistry",
    "TextPrompt",
    "provider_registry",
]

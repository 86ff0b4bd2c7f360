import logging
from typing import Dict, List, Optional, Sequence

from scholarcast.config import Settings
from scholarcast.providers.base import BaseProvider
from scholarcast.providers.claude import ClaudeProvider
from scholarcast.providers.gemini import GeminiProvider
from scholarcast.providers.gemini_image import GeminiImageProvider
from scholarcast.providers.groq import GroqProvider
from scholarcast.providers.huggingface import HuggingFaceProvider
from scholarcast.providers.mistral import MistralProvider
from scholarcast.providers.openai import OpenAIProvider
from scholarcast.providers.openai_compatible import OpenAICompatibleProvider
from scholarcast.providers.qwen import QwenImageProvider
from scholarcast.providers.runware import RunwareProvider

logger = logging.getLogger(__name__)


# Static priority per task type: local/cheapest first, most capable last
TEXT_PRIORITY = ("ollama", "groq", "gemini", "mistral", "openai", "claude")
IMAGE_PRIORITY = ("runware", "huggingface", "qwen", "gemini")

# Diagram-like styles need precise layouts; only the precision model is used
STYLE_IMAGE_PROVIDERS: Dict[str, tuple] = {
    "diagram": ("gemini",),
    "schema": ("gemini",),
}


def build_text_providers(settings: Settings) -> Dict[str, BaseProvider]:
    timeout = settings.provider_timeout
    return {
        "ollama": OpenAICompatibleProvider(
            api_key=None,
            model=settings.ollama_model,
            base_url=settings.ollama_base_url,
            name="ollama",
            timeout=timeout,
        ),
        "groq": GroqProvider(settings.groq_api_key, settings.groq_model, timeout=timeout),
        "gemini": GeminiProvider(settings.gemini_api_key, settings.gemini_model, timeout=timeout),
        "mistral": MistralProvider(settings.mistral_api_key, settings.mistral_model, timeout=timeout),
        "openai": OpenAIProvider(settings.openai_api_key, settings.openai_model, timeout=timeout),
        "claude": ClaudeProvider(settings.anthropic_api_key, settings.claude_model, timeout=timeout),
    }


def build_image_providers(settings: Settings) -> Dict[str, BaseProvider]:
    timeout = settings.provider_timeout
    return {
        "runware": RunwareProvider(
            settings.runware_api_key, settings.runware_image_model, timeout=timeout
        ),
        "huggingface": HuggingFaceProvider(
            settings.huggingface_api_key, settings.huggingface_image_model, timeout=timeout
        ),
        "qwen": QwenImageProvider(
            settings.qwen_image_api_key, settings.qwen_image_model, timeout=timeout
        ),
        "gemini": GeminiImageProvider(
            settings.gemini_api_key, settings.gemini_image_model, timeout=timeout
        ),
    }


class ProviderRegistry:
    """Central registry for generation providers - built from a settings snapshot.

    The registry is read-only once initialized; provider lists are recomputed
    from `is_configured()` on each call, which never touches the network.
    """

    def __init__(
        self,
        text_providers: Optional[Dict[str, BaseProvider]] = None,
        image_providers: Optional[Dict[str, BaseProvider]] = None,
        provider_timeout: Optional[float] = None,
    ):
        self._text: Dict[str, BaseProvider] = dict(text_providers or {})
        self._image: Dict[str, BaseProvider] = dict(image_providers or {})
        # Per-call cascade timeout; None falls back to the global settings
        self.provider_timeout = provider_timeout

    def initialize(self, settings: Settings) -> None:
        """Instantiate every known backend from the given settings"""
        self._text = build_text_providers(settings)
        self._image = build_image_providers(settings)
        self.provider_timeout = float(settings.provider_timeout)
        logger.info(
            f"Provider registry ready - text: {self.get_provider_names('text')}, "
            f"image: {self.get_provider_names('image')}"
        )

    @staticmethod
    def _ordered(providers: Dict[str, BaseProvider], order: Sequence[str]) -> List[BaseProvider]:
        # is_configured() errors are programmer errors and propagate
        return [
            providers[name]
            for name in order
            if name in providers and providers[name].is_configured()
        ]

    def text_providers(self) -> List[BaseProvider]:
        """Configured grading providers in priority order"""
        order = [name for name in TEXT_PRIORITY if name in self._text]
        order += [name for name in self._text if name not in TEXT_PRIORITY]
        return self._ordered(self._text, order)

    def image_providers(
        self,
        style: Optional[str] = None,
        order: Optional[Sequence[str]] = None,
    ) -> List[BaseProvider]:
        """Configured illustration providers.

        An explicit caller order wins; otherwise diagram-like styles use their
        restricted subset and everything else the static priority.
        """
        if order:
            seen = list(dict.fromkeys(order))
        elif style in STYLE_IMAGE_PROVIDERS:
            seen = list(STYLE_IMAGE_PROVIDERS[style])
        else:
            seen = [name for name in IMAGE_PRIORITY if name in self._image]
            seen += [name for name in self._image if name not in IMAGE_PRIORITY]
        return self._ordered(self._image, seen)

    def get_provider_names(self, task: str = "text") -> List[str]:
        """Return names of configured providers for a task ("text" or "image")"""
        if task == "image":
            return [p.name for p in self.image_providers()]
        return [p.name for p in self.text_providers()]

    async def cleanup(self):
        """Close every provider's HTTP client."""
        for provider in [*self._text.values(), *self._image.values()]:
            try:
                await provider.cleanup()
            except Exception as e:
                logger.warning(f"Error cleaning up provider {provider.name}: {e}")
        self._text.clear()
        self._image.clear()


# Singleton instance
provider_registry = ProviderRegistry()


def get_provider_registry() -> ProviderRegistry:
    """FastAPI dependency returning the process-wide registry"""
    return provider_registry

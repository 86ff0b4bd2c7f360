"""
OpenAI-compatible provider for a local Ollama server (or LM Studio, vLLM, ...).
"""

import httpx
from typing import Optional

from scholarcast.providers.base import OpenAIFormatProvider


class OpenAICompatibleProvider(OpenAIFormatProvider):
    """Provider for OpenAI-compatible APIs (Ollama, LM Studio, vLLM, etc.).

    Unlike other providers, this one accepts a dynamic base_url and is enabled
    by the presence of that URL rather than an API key.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str],
        name: str = "ollama",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize an OpenAI-compatible provider.

        Args:
            api_key: Optional API key (local servers usually don't require auth)
            model: The model to use
            base_url: The base URL of the API (e.g., http://localhost:11434/v1)
            name: The unique name for this provider instance
        """
        super().__init__(api_key, model, transport=transport, timeout=timeout)
        self.name = name
        self.base_url = (base_url or "").rstrip("/")

    def is_configured(self) -> bool:
        """Local servers are enabled by a configured URL, not by a key."""
        return bool(self.base_url)

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx
import orjson

from scholarcast.config import settings

logger = logging.getLogger(__name__)

# Shared text generation defaults
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.2


class ProviderError(Exception):
    """A provider call failed before producing usable output."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderResponseError(ProviderError):
    """The provider answered, but the answer carried no usable content."""


@dataclass(frozen=True)
class TextPrompt:
    """Input for text-completion providers"""

    prompt: str
    system_prompt: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    json_mode: bool = False  # Ask the backend for a bare JSON object when it supports it


@dataclass(frozen=True)
class ImagePrompt:
    """Input for image-generation providers"""

    prompt: str
    negative_prompt: Optional[str] = None
    width: int = 1024
    height: int = 576
    aspect_ratio: str = "16:9"


@dataclass
class ProviderOutput:
    """Raw output of a single provider call"""

    provider: str
    model: str
    text: str = ""
    data: bytes = b""
    mime_type: Optional[str] = None


class BaseProvider(ABC):
    """Abstract base class for generation providers"""

    name: str  # Provider identifier: "groq", "gemini", "runware", ...
    base_url: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model = model
        self._transport = transport
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeout(self) -> float:
        """Provider timeout in seconds: the registry snapshot value, else settings."""
        if self._timeout is not None:
            return float(self._timeout)
        return float(settings.provider_timeout)

    def _headers(self) -> dict:
        """Request headers for this provider. Override for provider-specific auth."""
        return {"Content-Type": "application/json"}

    @property
    def client(self) -> httpx.AsyncClient:
        """HTTP client, created on first use so unconfigured providers stay idle."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @abstractmethod
    async def invoke(self, prompt) -> ProviderOutput:
        """Run one generation request and return the raw output"""
        pass

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)

    async def _post_json(self, url: str, payload: dict) -> dict:
        """POST a JSON payload and decode the JSON answer.

        Non-2xx statuses raise `ProviderError` with a trimmed body for debugging.
        """
        response = await self.client.post(url, content=orjson.dumps(payload))
        if response.status_code >= 400:
            logger.error(
                f"{self.name} API error for model '{self.model}': "
                f"status={response.status_code}, body={response.text[:300]}"
            )
            raise ProviderError(
                self.name, f"HTTP {response.status_code}: {response.text[:300]}"
            )
        return self._decode_json(response.content)

    def _decode_json(self, body: bytes) -> dict:
        try:
            data = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            logger.debug(f"JSON parse error in {self.name}: {e}")
            raise ProviderResponseError(self.name, "response body is not JSON") from e
        if not isinstance(data, dict):
            raise ProviderResponseError(self.name, "response body is not a JSON object")
        return data


class OpenAIFormatProvider(BaseProvider):
    """Base class for providers using the OpenAI chat completions format.

    Subclasses only need to set `name` and `base_url` class attributes.
    """

    name: str = ""  # Override in subclass
    base_url: str = ""  # Override in subclass

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(self, prompt: TextPrompt) -> dict:
        """Chat completion request body. Override for provider-specific options."""
        messages = []
        if prompt.system_prompt:
            messages.append({"role": "system", "content": prompt.system_prompt})
        messages.append({"role": "user", "content": prompt.prompt})

        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": prompt.max_tokens,
            "temperature": prompt.temperature,
        }

    async def invoke(self, prompt: TextPrompt) -> ProviderOutput:
        """Run a chat completion and return the assistant text."""
        data = await self._post_json("/chat/completions", self._build_payload(prompt))

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(self.name, "no choices in completion") from e
        if not text.strip():
            raise ProviderResponseError(self.name, "empty completion")

        return ProviderOutput(provider=self.name, model=self.model, text=text)


class ImageProvider(BaseProvider):
    """Base class for image-generation providers.

    Providers answer either with inline base64 data or with a URL to fetch;
    both are normalized to raw bytes in `ProviderOutput.data`.
    """

    default_mime_type = "image/png"
    _download_client: Optional[httpx.AsyncClient] = None

    def _image_output(self, data: bytes, mime_type: Optional[str]) -> ProviderOutput:
        return ProviderOutput(
            provider=self.name,
            model=self.model,
            data=data,
            mime_type=mime_type or self.default_mime_type,
        )

    def _decode_base64(self, encoded: str, mime_type: Optional[str] = None) -> ProviderOutput:
        # Tolerate data URLs: "data:image/png;base64,...."
        if encoded.startswith("data:") and "," in encoded:
            header, encoded = encoded.split(",", 1)
            mime_type = mime_type or header[5:].split(";", 1)[0]
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ProviderResponseError(self.name, "invalid base64 image payload") from e
        return self._image_output(data, mime_type)

    @property
    def download_client(self) -> httpx.AsyncClient:
        """Client without provider credentials, for result URLs on third-party hosts."""
        if self._download_client is None:
            self._download_client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._download_client

    async def cleanup(self):
        await super().cleanup()
        if self._download_client:
            await self._download_client.aclose()
            self._download_client = None

    async def _fetch_image(self, url: str) -> ProviderOutput:
        """Download an image the provider only returned by URL.

        Result URLs are often presigned; the API key must never be sent there.
        """
        response = await self.download_client.get(url)
        if response.status_code >= 400:
            raise ProviderError(self.name, f"image download failed: HTTP {response.status_code}")
        return self._image_output(response.content, response.headers.get("content-type"))

"""
Runware provider - the cheap default for illustration generation.

Runware's run API has shipped several response envelopes; images may sit
under `output`, `data.output`, `result` or the top level, and each image may
carry inline base64 or only a URL.
"""

from typing import Optional

from scholarcast.providers.base import (
    ImagePrompt,
    ImageProvider,
    ProviderOutput,
    ProviderResponseError,
)

BASE64_KEYS = ("image_base64", "base64", "b64_json", "data")
URL_KEYS = ("url", "image_url")


class RunwareProvider(ImageProvider):
    name = "runware"
    base_url = "https://api.runware.ai/v1"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _first_image(self, data: dict) -> Optional[dict]:
        """Find the first image entry across the known response envelopes."""
        nested = data.get("data")
        containers = (
            data.get("output"),
            nested.get("output") if isinstance(nested, dict) else None,
            data,
            data.get("result"),
        )
        for container in containers:
            if not isinstance(container, dict):
                continue
            images = container.get("images")
            if isinstance(images, list) and images and isinstance(images[0], dict):
                return images[0]
        return None

    async def invoke(self, prompt: ImagePrompt) -> ProviderOutput:
        """Generate one image with Runware."""
        payload = {
            "model": self.model,
            "input": {
                "prompt": prompt.prompt,
                "num_images": 1,
                "width": prompt.width,
                "height": prompt.height,
            },
        }
        if prompt.negative_prompt:
            payload["input"]["negative_prompt"] = prompt.negative_prompt

        data = await self._post_json("/runs", payload)
        first = self._first_image(data)
        if not first:
            raise ProviderResponseError(self.name, "Runware returned no image payload")

        encoded = next((first[k] for k in BASE64_KEYS if isinstance(first.get(k), str) and first[k]), None)
        if encoded:
            return self._decode_base64(encoded, first.get("mime_type"))

        url = next((first[k] for k in URL_KEYS if isinstance(first.get(k), str) and first[k]), None)
        if url:
            return await self._fetch_image(url)

        raise ProviderResponseError(self.name, "Runware returned no image payload")

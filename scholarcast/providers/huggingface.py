import orjson

from scholarcast.providers.base import (
    ImagePrompt,
    ImageProvider,
    ProviderError,
    ProviderOutput,
    ProviderResponseError,
)


class HuggingFaceProvider(ImageProvider):
    """HuggingFace inference router (Flux). Answers with raw image bytes."""

    name = "huggingface"
    base_url = "https://router.huggingface.co"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def invoke(self, prompt: ImagePrompt) -> ProviderOutput:
        parameters = {
            "width": prompt.width,
            "height": prompt.height,
            "guidance_scale": 4.5,
            "num_inference_steps": 28,
        }
        if prompt.negative_prompt:
            parameters["negative_prompt"] = prompt.negative_prompt

        payload = {"inputs": prompt.prompt, "parameters": parameters}
        response = await self.client.post(
            f"/models/{self.model}", content=orjson.dumps(payload)
        )
        if response.status_code >= 400:
            raise ProviderError(
                self.name, f"HTTP {response.status_code}: {response.text[:300]}"
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            # Model loading / quota messages come back as JSON instead of bytes
            try:
                error = orjson.loads(response.content).get("error")
            except (orjson.JSONDecodeError, AttributeError):
                error = None
            raise ProviderResponseError(
                self.name, error or "HuggingFace returned JSON payload without image data"
            )

        if not response.content:
            raise ProviderResponseError(self.name, "empty image body")

        return self._image_output(response.content, content_type or None)

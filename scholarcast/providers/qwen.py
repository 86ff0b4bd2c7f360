from scholarcast.providers.base import (
    ImagePrompt,
    ImageProvider,
    ProviderOutput,
    ProviderResponseError,
)


class QwenImageProvider(ImageProvider):
    """Qwen-Image through Alibaba DashScope text2image."""

    name = "qwen"
    base_url = "https://dashscope.aliyuncs.com/api/v1"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def invoke(self, prompt: ImagePrompt) -> ProviderOutput:
        payload = {
            "model": self.model,
            "input": {"prompt": prompt.prompt},
            "parameters": {
                "size": f"{prompt.width}*{prompt.height}",
                "n": 1,
            },
        }
        if prompt.negative_prompt:
            payload["input"]["negative_prompt"] = prompt.negative_prompt

        data = await self._post_json("/services/aigc/image-generation/text2image", payload)
        results = (data.get("output") or {}).get("results") or []
        first = results[0] if results and isinstance(results[0], dict) else {}

        if first.get("image_base64"):
            return self._decode_base64(first["image_base64"], first.get("mime_type"))
        if first.get("url"):
            return await self._fetch_image(first["url"])

        raise ProviderResponseError(self.name, data.get("message") or "Qwen-Image returned no image")

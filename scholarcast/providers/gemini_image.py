"""
Gemini image generation (Nano Banana Pro / Nano Banana).

The precision fallback of the image cascade and the only provider used for
diagram-like styles.
"""

from scholarcast.providers.base import (
    ImagePrompt,
    ImageProvider,
    ProviderOutput,
    ProviderResponseError,
)

# Only the Pro model accepts an explicit output resolution
SIZED_MODELS = ("gemini-3-pro-image-preview",)


class GeminiImageProvider(ImageProvider):
    name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    async def invoke(self, prompt: ImagePrompt) -> ProviderOutput:
        image_config = {"aspectRatio": prompt.aspect_ratio}
        if self.model in SIZED_MODELS:
            image_config["imageSize"] = "2K" if prompt.height >= 1080 else "1K"

        payload = {
            "contents": [{"parts": [{"text": prompt.prompt}]}],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": image_config,
            },
        }

        url = f"/models/{self.model}:generateContent?key={self.api_key}"
        data = await self._post_json(url, payload)

        candidates = data.get("candidates") or []
        parts = ((candidates[0].get("content") or {}).get("parts") or []) if candidates else []
        for part in parts:
            if part.get("thought"):
                continue
            inline = part.get("inlineData")
            if inline and inline.get("data"):
                return self._decode_base64(inline["data"], inline.get("mimeType"))

        raise ProviderResponseError(self.name, "No images generated")

from scholarcast.providers.base import (
    BaseProvider,
    ProviderOutput,
    ProviderResponseError,
    TextPrompt,
)


class GeminiProvider(BaseProvider):
    name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def _extract_content(self, data: dict) -> str:
        """Extract text content from a Gemini generateContent response."""
        candidates = data.get("candidates") or []
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            return "".join(part.get("text", "") for part in parts if not part.get("thought"))
        return ""

    async def invoke(self, prompt: TextPrompt) -> ProviderOutput:
        """Generate text with Gemini."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt.prompt}]}],
            "generationConfig": {
                "maxOutputTokens": prompt.max_tokens,
                "temperature": prompt.temperature,
            },
        }
        if prompt.system_prompt:
            payload["systemInstruction"] = {
                "parts": [{"text": prompt.system_prompt}]
            }

        url = f"/models/{self.model}:generateContent?key={self.api_key}"
        data = await self._post_json(url, payload)
        text = self._extract_content(data)
        if not text.strip():
            raise ProviderResponseError(self.name, "no text in candidates")

        return ProviderOutput(provider=self.name, model=self.model, text=text)

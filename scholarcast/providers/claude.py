from scholarcast.providers.base import (
    BaseProvider,
    ProviderOutput,
    ProviderResponseError,
    TextPrompt,
)


class ClaudeProvider(BaseProvider):
    name = "claude"
    base_url = "https://api.anthropic.com/v1"

    def _headers(self) -> dict:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }

    def _extract_content(self, data: dict) -> str:
        """Join the text blocks of a Claude message."""
        blocks = data.get("content") or []
        return "".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )

    async def invoke(self, prompt: TextPrompt) -> ProviderOutput:
        """Create a Claude message for the prompt."""
        payload = {
            "model": self.model,
            "max_tokens": prompt.max_tokens,
            "temperature": prompt.temperature,
            "messages": [{"role": "user", "content": prompt.prompt}],
        }
        if prompt.system_prompt:
            payload["system"] = prompt.system_prompt

        data = await self._post_json("/messages", payload)
        text = self._extract_content(data)
        if not text.strip():
            raise ProviderResponseError(self.name, "no text blocks in message")

        return ProviderOutput(provider=self.name, model=self.model, text=text)

from scholarcast.providers.base import OpenAIFormatProvider, TextPrompt


class OpenAIProvider(OpenAIFormatProvider):
    """OpenAI GPT provider."""

    name = "openai"
    base_url = "https://api.openai.com/v1"

    def _build_payload(self, prompt: TextPrompt) -> dict:
        payload = super()._build_payload(prompt)
        # Current OpenAI models reject the legacy max_tokens field
        payload["max_completion_tokens"] = payload.pop("max_tokens")
        if prompt.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

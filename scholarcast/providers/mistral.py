from scholarcast.providers.base import OpenAIFormatProvider, TextPrompt


class MistralProvider(OpenAIFormatProvider):
    """Mistral AI provider."""

    name = "mistral"
    base_url = "https://api.mistral.ai/v1"

    def _build_payload(self, prompt: TextPrompt) -> dict:
        payload = super()._build_payload(prompt)
        if prompt.json_mode:
            payload["response_format"] = {"type": "json_object"}
        payload["random_seed"] = 0
        return payload

from scholarcast.providers.base import OpenAIFormatProvider, TextPrompt


class GroqProvider(OpenAIFormatProvider):
    """Groq provider (fast hosted open-weight models)."""

    name = "groq"
    base_url = "https://api.groq.com/openai/v1"

    def _build_payload(self, prompt: TextPrompt) -> dict:
        payload = super()._build_payload(prompt)
        if prompt.json_mode:
            # Groq requires the word "JSON" in the messages for this mode
            payload["response_format"] = {"type": "json_object"}
        return payload

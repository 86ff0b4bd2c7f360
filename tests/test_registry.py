"""Tests for provider registration and ordering."""

import pytest

from fakes import ScriptedProvider
from scholarcast.config import Settings
from scholarcast.providers.registry import ProviderRegistry


def names(providers):
    return [p.name for p in providers]


def make_registry(**image_overrides):
    text = {
        name: ScriptedProvider(name)
        for name in ("claude", "openai", "groq", "ollama", "mistral", "gemini")
    }
    image = {
        name: ScriptedProvider(name)
        for name in ("gemini", "qwen", "runware", "huggingface")
    }
    image.update(image_overrides)
    return ProviderRegistry(text_providers=text, image_providers=image)


def test_text_priority_order():
    registry = make_registry()
    assert names(registry.text_providers()) == ["ollama", "groq", "gemini", "mistral", "openai", "claude"]


def test_image_priority_order():
    registry = make_registry()
    assert names(registry.image_providers()) == ["runware", "huggingface", "qwen", "gemini"]


def test_unconfigured_providers_are_skipped():
    registry = make_registry(runware=ScriptedProvider("runware", configured=False))
    assert names(registry.image_providers()) == ["huggingface", "qwen", "gemini"]


@pytest.mark.parametrize("style", ["diagram", "schema"])
def test_diagram_styles_use_gemini_only(style):
    registry = make_registry()
    assert names(registry.image_providers(style)) == ["gemini"]


def test_explicit_order_wins():
    registry = make_registry()
    assert names(registry.image_providers("diagram", ["qwen", "runware", "qwen"])) == ["qwen", "runware"]


def test_empty_registry():
    registry = ProviderRegistry()
    assert registry.text_providers() == []
    assert registry.image_providers() == []
    assert registry.get_provider_names("image") == []


def test_initialize_from_settings(monkeypatch):
    for field in Settings.model_fields:
        monkeypatch.delenv(field.upper(), raising=False)
    settings = Settings(
        _env_file=None,
        groq_api_key="gsk-test",
        anthropic_api_key="sk-ant-test",
        ollama_base_url="http://localhost:11434/v1",
        runware_api_key="rw-test",
        gemini_api_key="gm-test",
    )
    registry = ProviderRegistry()
    registry.initialize(settings)

    assert registry.get_provider_names("text") == ["ollama", "groq", "gemini", "claude"]
    assert registry.get_provider_names("image") == ["runware", "gemini"]


@pytest.mark.asyncio
async def test_cleanup_empties_registry():
    registry = make_registry()
    await registry.cleanup()
    assert registry.text_providers() == []
    assert registry.image_providers() == []


class BrokenProvider(ScriptedProvider):
    def is_configured(self) -> bool:
        raise RuntimeError("misconfigured provider")


def test_is_configured_errors_propagate():
    registry = ProviderRegistry(
        text_providers={"groq": BrokenProvider("groq")},
        image_providers={"runware": BrokenProvider("runware")},
    )

    with pytest.raises(RuntimeError, match="misconfigured provider"):
        registry.text_providers()
    with pytest.raises(RuntimeError, match="misconfigured provider"):
        registry.image_providers()


def test_initialize_carries_timeout_snapshot(monkeypatch):
    for field in Settings.model_fields:
        monkeypatch.delenv(field.upper(), raising=False)
    settings = Settings(_env_file=None, groq_api_key="gsk-test", provider_timeout=12)
    registry = ProviderRegistry()
    registry.initialize(settings)

    assert registry.provider_timeout == 12.0
    assert registry.text_providers()[0].timeout == 12.0

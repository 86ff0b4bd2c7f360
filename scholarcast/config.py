import logging
import sys

from pydantic_settings import BaseSettings
from typing import Optional


def setup_logging():
    """Configure application logging."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# Initialize logging on import
setup_logging()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Text providers (grading), cheapest/local first
    ollama_base_url: Optional[str] = None
    groq_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Image providers (illustrations)
    runware_api_key: Optional[str] = None
    huggingface_api_key: Optional[str] = None
    qwen_image_api_key: Optional[str] = None

    # Provider model configuration
    ollama_model: str = "llama3.1:8b"
    groq_model: str = "llama-3.3-70b-versatile"
    gemini_model: str = "gemini-2.5-flash"
    mistral_model: str = "mistral-small-latest"
    openai_model: str = "gpt-4.1-mini"
    claude_model: str = "claude-sonnet-4-5-20250929"
    runware_image_model: str = "runware:97@1"
    huggingface_image_model: str = "black-forest-labs/FLUX.1-dev"
    qwen_image_model: str = "qwen-image"
    gemini_image_model: str = "gemini-3-pro-image-preview"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Timeout settings (seconds), applied to every single provider call
    provider_timeout: int = 30

    # Illustration storage
    database_url: str = "sqlite+aiosqlite:///./data/scholarcast.db"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


settings = Settings()

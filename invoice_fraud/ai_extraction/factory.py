from typing import ClassVar

from invoice_fraud.ai_extraction.base import BaseFieldExtractor
from invoice_fraud.ai_extraction.example_client_adapter import ExampleClientAdapter
from invoice_fraud.ai_extraction.extractor import AiFieldExtractor
from invoice_fraud.ai_extraction.openai_client_adapter import OpenAIClientAdapter
from invoice_fraud.config.settings import Settings


class FieldExtractorFactory:
    """Creates the configured AI field extractor, or None when AI is disabled."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseFieldExtractor | None:
        provider = settings.ai_provider.lower()
        if provider == "none":
            return None
        if provider == "example":
            return AiFieldExtractor(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                max_input_chars=settings.ai_max_input_chars,
            )
        client = OpenAIClientAdapter(
            api_key=settings.ai_api_key,
            timeout_seconds=settings.ai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return AiFieldExtractor(
            client=client,
            model=settings.ai_model_name,
            temperature=settings.ai_temperature,
            max_input_chars=settings.ai_max_input_chars,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if settings.ai_base_url.strip():
            return settings.ai_base_url.strip()
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            raise ValueError("ai_base_url is required for ai_provider=openai_compatible")
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "none",
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown AI provider '{provider}'. Choose from: {supported}")

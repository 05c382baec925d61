from typing import ClassVar, NamedTuple

from docaudit.config.settings import Settings
from docaudit.reasoning.client_base import BaseReasoningClient
from docaudit.reasoning.example_client_adapter import ExampleClientAdapter
from docaudit.reasoning.openai_client_adapter import OpenAIClientAdapter


class _Provider(NamedTuple):
    api_key_setting: str
    base_url: str | None


class ReasoningClientFactory:
    """Creates the configured reasoning backend client.

    Every provider except ``example`` speaks the OpenAI chat completions
    protocol; they differ only in API key and base URL.
    """

    PROVIDERS: ClassVar[dict[str, _Provider]] = {
        "openai": _Provider("reasoning_openai_api_key", None),
        "openai_compatible": _Provider("reasoning_openai_compatible_api_key", None),
        "openrouter": _Provider("reasoning_openrouter_api_key", "https://openrouter.ai/api/v1"),
        "groq": _Provider("reasoning_groq_api_key", "https://api.groq.com/openai/v1"),
        "together": _Provider("reasoning_together_api_key", "https://api.together.xyz/v1"),
        "deepseek": _Provider("reasoning_deepseek_api_key", "https://api.deepseek.com/v1"),
        "ollama": _Provider("reasoning_ollama_api_key", "http://localhost:11434/v1"),
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseReasoningClient:
        name = settings.reasoning_provider.strip().lower()
        if name == "example":
            return ExampleClientAdapter()

        provider = cls.PROVIDERS.get(name)
        if provider is None:
            supported = ["example", *sorted(cls.PROVIDERS)]
            raise ValueError(f"Unknown reasoning provider '{name}'. Choose from: {supported}")

        base_url = provider.base_url
        if name == "openai_compatible":
            base_url = settings.reasoning_openai_compatible_base_url.strip()
            if not base_url:
                raise ValueError(
                    "reasoning_openai_compatible_base_url is required for "
                    "reasoning_provider=openai_compatible"
                )

        return OpenAIClientAdapter(
            api_key=getattr(settings, provider.api_key_setting) or "",
            model=settings.reasoning_model_name,
            timeout_seconds=settings.reasoning_timeout_seconds,
            temperature=settings.reasoning_temperature,
            base_url=base_url,
        )

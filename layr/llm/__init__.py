"""AI provider abstraction and registry."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from layr.errors import UnsupportedProviderError
from layr.llm.base import AIProvider, ProviderConfig
from layr.llm.providers.claude import ClaudeProvider
from layr.llm.providers.gemini import GeminiProvider
from layr.llm.providers.groq import GroqProvider
from layr.llm.providers.openai import OpenAIProvider

ProviderFactory = Callable[[ProviderConfig], AIProvider]

DEFAULT_FACTORIES: dict[str, ProviderFactory] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "claude": ClaudeProvider,
    "groq": GroqProvider,
}


class ProviderRegistry:
    """Maps provider identifiers to constructors.

    Instances are cached per (identifier, config), so each configuration is
    constructed at most once. Swapping credentials means passing a new config.
    """

    def __init__(self, factories: Mapping[str, ProviderFactory] | None = None) -> None:
        self._factories: dict[str, ProviderFactory] = dict(
            DEFAULT_FACTORIES if factories is None else factories
        )
        self._instances: dict[tuple[str, ProviderConfig], AIProvider] = {}

    def register(self, provider_type: str, factory: ProviderFactory) -> None:
        self._factories[provider_type] = factory
        for key in [k for k in self._instances if k[0] == provider_type]:
            del self._instances[key]

    def create_provider(self, provider_type: str, config: ProviderConfig | None = None) -> AIProvider:
        factory = self._factories.get(provider_type)
        if factory is None:
            raise UnsupportedProviderError(provider_type)

        config = config or ProviderConfig()
        key = (provider_type, config)
        if key not in self._instances:
            self._instances[key] = factory(config)
        return self._instances[key]

    def supported_providers(self) -> list[str]:
        return list(self._factories)

    def __contains__(self, provider_type: object) -> bool:
        return provider_type in self._factories


__all__ = [
    "AIProvider",
    "ProviderConfig",
    "ProviderFactory",
    "ProviderRegistry",
    "UnsupportedProviderError",
]
